"""
Management command to run the analysis pipeline on a local CSV file.
"""
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from rnseanomaly.common.exceptions import AnalysisError
from rnseanomaly.config.utils import build_analysis_service, call_service


class Command(BaseCommand):
    help = 'Analyzes a CSV file on behalf of an existing user and stores the result'

    def add_arguments(self, parser):
        parser.add_argument('path', type=Path, help='CSV file with a header row')
        parser.add_argument('--owner', required=True, help='Email of the owning user')
        parser.add_argument('--threshold', type=float, default=None, help='Override the flag threshold')
        parser.add_argument('--output', type=Path, default=None, help='Write the result CSV here')

    def handle(self, *args, **options):
        path = options['path']
        if not path.is_file():
            raise CommandError(f'File not found: {path}')

        User = get_user_model()
        try:
            user = User.objects.get(username=options['owner'].strip().lower())
        except User.DoesNotExist:
            raise CommandError(f'No user with email "{options["owner"]}"')

        service = build_analysis_service()
        if options['threshold'] is not None:
            service.flag_threshold = options['threshold']

        owner = str(user.pk)
        self.stdout.write(f'Analyzing {path.name} ...')
        try:
            outcome = call_service(service, service.analyze_upload, owner, path.name, path.read_bytes())
        except AnalysisError as e:
            raise CommandError(f'{e.code}: {e.message}')

        self.stdout.write(
            self.style.SUCCESS(f'  Stored result {outcome.record_id}: {outcome.anomaly_count} anomalies')
        )
        for index, confidence in zip(outcome.anomaly_indices, outcome.confidence_scores):
            self.stdout.write(f'    index {index}: confidence {confidence:.3f}')

        if options['output']:
            body = call_service(service, service.download, owner, outcome.record_id)
            options['output'].write_text(body)
            self.stdout.write(self.style.SUCCESS(f'  Wrote {options["output"]}'))
