import uuid

import django.db.models.deletion
from django.db import migrations, models

import apps.planners.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PlannerCouple',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('couple_names', models.CharField(help_text='e.g. "Sarah & Mike"', max_length=255)),
                ('couple_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('wedding_date', models.DateField(blank=True, null=True)),
                ('wedding_location', models.CharField(blank=True, max_length=255, null=True)),
                ('venue_name', models.CharField(blank=True, max_length=255, null=True)),
                ('notes', models.TextField(blank=True, help_text="Planner's private notes", null=True)),
                ('share_link_id', models.CharField(default=apps.planners.models._new_share_link_id, max_length=64, unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('last_activity', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'planner_couples',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='SharedVendor',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('vendor_name', models.CharField(max_length=255)),
                ('vendor_type', models.CharField(help_text='Photographer, Florist, Venue, ...', max_length=100)),
                ('contact_name', models.CharField(blank=True, max_length=255, null=True)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone', models.CharField(blank=True, max_length=50, null=True)),
                ('website', models.URLField(blank=True, null=True)),
                ('planner_note', models.TextField(blank=True, null=True)),
                ('couple_status', models.CharField(blank=True, choices=[('approved', 'Approved'), ('booked', 'Booked & Confirmed'), ('declined', 'Not for us')], max_length=20, null=True)),
                ('couple_note', models.TextField(blank=True, null=True)),
                ('planner_couple', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vendors', to='planners.plannercouple')),
            ],
            options={
                'db_table': 'shared_vendors',
                'ordering': ['vendor_type', 'vendor_name'],
            },
        ),
    ]
