from django.core.management.base import BaseCommand, CommandError

from challenges.utils.db_utils import ChallengeNotFound, delete_challenge


class Command(BaseCommand):
    help = "Delete a challenge by id (operator only, there is no HTTP endpoint for this)"

    def add_arguments(self, parser):
        parser.add_argument("challenge_id", type=int)

    def handle(self, *args, **options):
        try:
            challenge = delete_challenge(options["challenge_id"])
        except ChallengeNotFound as e:
            raise CommandError(str(e)) from e
        self.stdout.write(self.style.SUCCESS(f"Deleted challenge '{challenge.title}'"))
