from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AdminUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("username", models.CharField(max_length=150, unique=True)),
                ("password_hash", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("last_login", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "admin_users",
            },
        ),
        migrations.CreateModel(
            name="License",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("license_key", models.CharField(max_length=64, unique=True)),
                ("machine_id", models.CharField(blank=True, max_length=255, null=True)),
                ("user_email", models.CharField(max_length=255)),
                ("user_name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("expires_at", models.DateTimeField()),
                ("is_active", models.BooleanField(default=True)),
                ("last_used", models.DateTimeField(blank=True, null=True)),
                ("usage_count", models.PositiveIntegerField(default=0)),
                ("notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["expires_at"], name="licenses_expires_idx")],
            },
        ),
        migrations.CreateModel(
            name="LicenseLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("license_key", models.CharField(db_index=True, max_length=64)),
                ("action", models.CharField(max_length=64)),
                ("machine_id", models.CharField(blank=True, max_length=255, null=True)),
                ("ip_address", models.CharField(blank=True, max_length=64, null=True)),
                ("user_agent", models.TextField(blank=True, null=True)),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("details", models.JSONField(blank=True, default=dict)),
            ],
            options={
                "db_table": "license_logs",
                "ordering": ["-timestamp", "-id"],
            },
        ),
    ]
