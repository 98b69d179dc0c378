import uuid

import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


def history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        (
            "history_type",
            models.CharField(
                choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")],
                max_length=1,
            ),
        ),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def base_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid.uuid4, editable=False, primary_key=True, serialize=False
            ),
        ),
        ("created", models.DateTimeField(auto_now_add=True, db_index=True)),
        ("modified", models.DateTimeField(auto_now=True, db_index=True)),
    ]


def historical_base_fields():
    return [
        ("id", models.UUIDField(db_index=True, default=uuid.uuid4, editable=False)),
        ("created", models.DateTimeField(blank=True, db_index=True, editable=False)),
        ("modified", models.DateTimeField(blank=True, db_index=True, editable=False)),
    ]


def historical_fk(to):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
    )


def historical_options(verbose_name, verbose_name_plural):
    return {
        "verbose_name": f"historical {verbose_name}",
        "verbose_name_plural": f"historical {verbose_name_plural}",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


def fighter_type_fields():
    return [
        (
            "fighter_class",
            models.CharField(
                blank=True,
                help_text=(
                    "The fighter class, e.g. Leader, Champion, Ganger or Exotic Beast."
                ),
                max_length=255,
            ),
        ),
        (
            "cost",
            models.PositiveIntegerField(
                default=0, help_text="The base cost to hire this fighter type."
            ),
        ),
        (
            "is_spyrer",
            models.BooleanField(
                default=False,
                help_text="Spyrers track kills separately for advancement.",
            ),
        ),
    ]


HISTORICAL_BASES = (simple_history.models.HistoricalChanges, models.Model)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ContentEffectCategory",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=255, unique=True)),
            ],
            options={
                "verbose_name": "Effect Category",
                "verbose_name_plural": "Effect Categories",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ContentEffectType",
            fields=[
                *base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "type_specific_data",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text=(
                            "Extra data copied onto fighter effects of this type."
                        ),
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="effect_types",
                        to="content.contenteffectcategory",
                    ),
                ),
            ],
            options={
                "verbose_name": "Effect Type",
                "verbose_name_plural": "Effect Types",
                "ordering": ["category", "name"],
            },
        ),
        migrations.CreateModel(
            name="ContentEffectTypeModifier",
            fields=[
                *base_fields(),
                ("stat_name", models.CharField(max_length=100)),
                (
                    "default_numeric_value",
                    models.IntegerField(
                        help_text=(
                            "The value a new modifier of this type starts with, "
                            "e.g. +1 or -1."
                        )
                    ),
                ),
                (
                    "effect_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modifiers",
                        to="content.contenteffecttype",
                    ),
                ),
            ],
            options={
                "verbose_name": "Effect Type Modifier",
                "verbose_name_plural": "Effect Type Modifiers",
                "ordering": ["effect_type", "stat_name"],
            },
        ),
        migrations.CreateModel(
            name="ContentEquipment",
            fields=[
                *base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "cost",
                    models.PositiveIntegerField(
                        default=0, help_text="The listed trading post cost."
                    ),
                ),
                (
                    "equipment_type",
                    models.CharField(
                        choices=[("weapon", "Weapon"), ("wargear", "Wargear")],
                        default="wargear",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "verbose_name": "Equipment",
                "verbose_name_plural": "Equipment",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ContentFighterType",
            fields=[
                *base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                *fighter_type_fields(),
            ],
            options={
                "verbose_name": "Fighter Type",
                "verbose_name_plural": "Fighter Types",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ContentSkillCategory",
            fields=[
                *base_fields(),
                ("name", models.CharField(max_length=255, unique=True)),
            ],
            options={
                "verbose_name": "Skill Tree",
                "verbose_name_plural": "Skill Trees",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ContentSkill",
            fields=[
                *base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="skills",
                        to="content.contentskillcategory",
                        verbose_name="tree",
                    ),
                ),
            ],
            options={
                "verbose_name": "Skill",
                "verbose_name_plural": "Skills",
                "ordering": ["category", "name"],
                "unique_together": {("name", "category")},
            },
        ),
        migrations.CreateModel(
            name="HistoricalContentEffectCategory",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                *history_fields(),
            ],
            options=historical_options("Effect Category", "Effect Categories"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalContentEffectType",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "type_specific_data",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text=(
                            "Extra data copied onto fighter effects of this type."
                        ),
                    ),
                ),
                ("category", historical_fk("content.contenteffectcategory")),
                *history_fields(),
            ],
            options=historical_options("Effect Type", "Effect Types"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalContentEquipment",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "cost",
                    models.PositiveIntegerField(
                        default=0, help_text="The listed trading post cost."
                    ),
                ),
                (
                    "equipment_type",
                    models.CharField(
                        choices=[("weapon", "Weapon"), ("wargear", "Wargear")],
                        default="wargear",
                        max_length=20,
                    ),
                ),
                *history_fields(),
            ],
            options=historical_options("Equipment", "Equipment"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalContentFighterType",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                *fighter_type_fields(),
                *history_fields(),
            ],
            options=historical_options("Fighter Type", "Fighter Types"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalContentSkillCategory",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                *history_fields(),
            ],
            options=historical_options("Skill Tree", "Skill Trees"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalContentSkill",
            fields=[
                *historical_base_fields(),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="content.contentskillcategory",
                        verbose_name="tree",
                    ),
                ),
                *history_fields(),
            ],
            options=historical_options("Skill", "Skills"),
            bases=HISTORICAL_BASES,
        ),
    ]
