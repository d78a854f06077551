from django.core.management.base import BaseCommand, CommandError
from faker import Faker
import math
import random
import uuid

from apps.common.exceptions import DomainError
from apps.common.geo import EARTH_RADIUS_METERS, Point, km_to_meters
from apps.users.models import Profile
from apps.users.services import ProfileService

fake = Faker()


def scatter(center, radius_km, rng=random):
    """Random point within ``radius_km`` of ``center``."""
    # sqrt keeps the points uniform over the disc rather than bunched at the center
    meters = km_to_meters(radius_km) * math.sqrt(rng.random())
    bearing = rng.uniform(0, 2 * math.pi)
    angular = meters / EARTH_RADIUS_METERS

    lat = center.latitude + math.degrees(angular * math.cos(bearing))
    lon_scale = max(math.cos(math.radians(center.latitude)), 1e-6)
    lon = center.longitude + math.degrees(angular * math.sin(bearing) / lon_scale)

    lat = max(-90.0, min(90.0, lat))
    lon = (lon + 180.0) % 360.0 - 180.0
    return Point(lat, lon)


class Command(BaseCommand):
    help = 'Create fake profiles with locations scattered around a point'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=20, help='Number of profiles to create')
        parser.add_argument('--lat', type=float, default=0.0, help='Center latitude')
        parser.add_argument('--lon', type=float, default=0.0, help='Center longitude')
        parser.add_argument('--radius-km', type=float, default=10.0, help='Scatter radius in kilometers')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data')

    def handle(self, *args, **options):
        count = options['count']
        if count <= 0:
            raise CommandError('--count must be positive')
        if options['radius_km'] <= 0:
            raise CommandError('--radius-km must be positive')
        if not -90 <= options['lat'] <= 90 or not -180 <= options['lon'] <= 180:
            raise CommandError('Center coordinates are out of range')

        if options['seed'] is not None:
            random.seed(options['seed'])
            Faker.seed(options['seed'])

        center = Point(options['lat'], options['lon'])
        self.stdout.write(f'Creating {count} fake profiles...')

        created = 0
        for _ in range(count):
            gender = random.choice([Profile.GENDER_MAN, Profile.GENDER_WOMAN])
            name = fake.first_name_male() if gender == Profile.GENDER_MAN else fake.first_name_female()
            data = {
                'display_name': name,
                'birthday': fake.date_of_birth(minimum_age=18, maximum_age=60),
                'gender': gender,
                'search_gender': random.choice([Profile.GENDER_MAN, Profile.GENDER_WOMAN, Profile.SEARCH_ALL]),
                'looking_for': random.choice(['friendship', 'relationship', 'chat']),
                'location': fake.city(),
                'description': fake.text(max_nb_chars=200),
                'height': random.randint(150, 200),
                'weight': random.randint(45, 110),
            }
            try:
                profile = ProfileService.create_profile(
                    {'session_id': uuid.uuid4().hex},
                    data,
                    point=scatter(center, options['radius_km']),
                )
            except DomainError as e:
                self.stdout.write(self.style.ERROR(f'✗ Error: {e.message}'))
                continue

            created += 1
            self.stdout.write(self.style.SUCCESS(f'✓ Created: #{profile.pk} {name}'))

        self.stdout.write(self.style.SUCCESS(f'\n✅ Successfully created {created} fake profiles'))
