import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='StoredObject',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('stored_name', models.CharField(help_text='Storage name: {timestamp_ms}_{original filename}', max_length=300, unique=True)),
                ('label', models.CharField(blank=True, help_text='User-supplied document type', max_length=255, null=True)),
                ('upload_date', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('length', models.BigIntegerField(default=0, help_text='Object size in bytes')),
            ],
            options={
                'verbose_name': 'Stored object',
                'verbose_name_plural': 'Stored objects',
                'ordering': ['-upload_date'],
                'indexes': [models.Index(fields=['label'], name='catalog_label_idx')],
            },
        ),
    ]
