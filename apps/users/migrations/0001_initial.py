import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=255, unique=True)),
                ('username', models.CharField(max_length=150, unique=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session_id', models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ('telegram_id', models.BigIntegerField(blank=True, null=True, unique=True)),
                ('display_name', models.CharField(blank=True, max_length=100)),
                ('birthday', models.DateField(blank=True, help_text='Source of age', null=True)),
                ('gender', models.CharField(blank=True, choices=[('man', 'Man'), ('woman', 'Woman')], max_length=10)),
                ('search_gender', models.CharField(blank=True, choices=[('man', 'Man'), ('woman', 'Woman'), ('all', 'All')], default='all', max_length=10)),
                ('looking_for', models.CharField(blank=True, max_length=50)),
                ('location', models.CharField(blank=True, help_text='Free-text city or area', max_length=255)),
                ('description', models.TextField(blank=True)),
                ('height', models.PositiveSmallIntegerField(blank=True, help_text='Centimeters', null=True)),
                ('weight', models.PositiveSmallIntegerField(blank=True, help_text='Kilograms', null=True)),
                ('is_deleted', models.BooleanField(default=False)),
                ('is_blocked', models.BooleanField(default=False, help_text='Hidden from everyone')),
                ('is_premium', models.BooleanField(default=False)),
                ('is_show_distance', models.BooleanField(default=True)),
                ('is_invisible', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('last_online', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'profiles',
                'indexes': [
                    models.Index(fields=['is_deleted', 'is_blocked', 'gender'], name='profiles_visibility_idx'),
                    models.Index(fields=['birthday'], name='profiles_birthday_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProfileImage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255)),
                ('path', models.CharField(blank=True, max_length=500)),
                ('url', models.CharField(blank=True, max_length=500)),
                ('size', models.PositiveIntegerField(default=0)),
                ('is_deleted', models.BooleanField(default=False)),
                ('is_blocked', models.BooleanField(default=False)),
                ('is_primary', models.BooleanField(default=False)),
                ('is_private', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('profile', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='images', to='users.profile')),
            ],
            options={
                'db_table': 'profile_images',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['profile', 'is_deleted', 'is_private'], name='profile_images_public_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Navigator',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('latitude', models.FloatField()),
                ('longitude', models.FloatField()),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('profile', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='navigator', to='users.profile')),
            ],
            options={
                'db_table': 'profile_navigators',
            },
        ),
        migrations.CreateModel(
            name='FilterPreference',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('search_gender', models.CharField(blank=True, choices=[('man', 'Man'), ('woman', 'Woman'), ('all', 'All')], default='all', max_length=10)),
                ('looking_for', models.CharField(blank=True, max_length=50)),
                ('age_from', models.PositiveSmallIntegerField(default=18)),
                ('age_to', models.PositiveSmallIntegerField(default=100)),
                ('distance', models.PositiveIntegerField(default=100, help_text='Search radius in kilometers')),
                ('page', models.PositiveIntegerField(default=1)),
                ('size', models.PositiveIntegerField(default=10)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('profile', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='filter_preference', to='users.profile')),
            ],
            options={
                'db_table': 'profile_filters',
            },
        ),
    ]
