from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='RecordSlot',
            fields=[
                ('key', models.CharField(help_text="Storage key of the collection (e.g. 'hm_patients')", max_length=64, primary_key=True, serialize=False)),
                ('value', models.JSONField(blank=True, default=list)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
