import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AnalysisRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('record_id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Public identifier used by history and download', unique=True)),
                ('owner', models.CharField(db_index=True, help_text='Opaque identity of the owning user', max_length=255)),
                ('filename', models.CharField(help_text='Original upload filename', max_length=255)),
                ('values', models.JSONField(help_text='Input series, verbatim and in order')),
                ('labels', models.JSONField(blank=True, help_text='First CSV column carried alongside the values', null=True)),
                ('flags', models.JSONField(default=list, help_text='Ordered [index, confidence] pairs')),
                ('anomaly_count', models.PositiveIntegerField(default=0)),
                ('parameters', models.JSONField(blank=True, default=dict, help_text='Scorer and extraction settings used for this run')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Analysis record',
                'verbose_name_plural': 'Analysis records',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['owner', '-created_at'], name='analysis_owner_recent_idx')],
            },
        ),
    ]
