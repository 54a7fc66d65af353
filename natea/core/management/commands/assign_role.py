from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = 'Assign an application role (admin, user, guest) to a user. Used to bootstrap the first admin.'

    def add_arguments(self, parser):
        parser.add_argument('username', type=str)
        parser.add_argument('role', type=str, choices=[choice for choice, _ in User.ROLE_CHOICES])

    def handle(self, *args, **options):
        username = options['username']
        role = options['role']

        try:
            user = User.objects.get(username=username)
        except User.DoesNotExist:
            raise CommandError(f'User "{username}" does not exist')

        old_role = user.role
        user.role = role
        user.save(update_fields=['role', 'updated_at'])

        self.stdout.write(self.style.SUCCESS(f'✓ {username}: {old_role} -> {role}'))
