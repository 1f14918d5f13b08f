from django.core.management.base import BaseCommand, CommandError

from challenges.utils.db_utils import seed_challenges
from user_customizable_configs.challenges.loader import (
    ChallengeCatalogLoadError,
    get_challenge_catalog,
)


class Command(BaseCommand):
    help = "Insert the YAML challenge catalog when no challenges exist yet"

    def handle(self, *args, **options):
        try:
            specs = get_challenge_catalog()
        except ChallengeCatalogLoadError as e:
            raise CommandError(f"Failed loading challenge catalog: {e}") from e

        created = seed_challenges(specs)
        if created:
            self.stdout.write(self.style.SUCCESS(f"Created {created} challenges"))
        else:
            self.stdout.write("Challenges already exist, nothing to do")
