import uuid

import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


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


def owner_field():
    return (
        "owner",
        models.ForeignKey(
            null=True,
            on_delete=django.db.models.deletion.CASCADE,
            to=settings.AUTH_USER_MODEL,
        ),
    )


def historical_base_fields():
    return [
        ("id", models.UUIDField(db_index=True, default=uuid.uuid4, editable=False)),
        ("created", models.DateTimeField(blank=True, db_index=True, editable=False)),
        ("modified", models.DateTimeField(blank=True, db_index=True, editable=False)),
        ("owner", historical_fk(settings.AUTH_USER_MODEL)),
    ]


def historical_fk(to, **kwargs):
    return models.ForeignKey(
        blank=True,
        db_constraint=False,
        null=True,
        on_delete=django.db.models.deletion.DO_NOTHING,
        related_name="+",
        to=to,
        **kwargs,
    )


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


def historical_options(verbose_name, verbose_name_plural):
    return {
        "verbose_name": f"historical {verbose_name}",
        "verbose_name_plural": f"historical {verbose_name_plural}",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


HISTORICAL_BASES = (simple_history.models.HistoricalChanges, models.Model)


def gang_fields():
    return [
        ("name", models.CharField(max_length=255)),
        ("credits", models.IntegerField(default=0, help_text="Spendable credits.")),
        (
            "rating",
            models.IntegerField(
                default=0, help_text="Sum of the effective cost of active fighters."
            ),
        ),
        (
            "meat",
            models.PositiveIntegerField(
                default=0, help_text="Meat used to feed starving fighters."
            ),
        ),
        (
            "stash_value",
            models.IntegerField(
                default=0,
                help_text="Total value of the equipment held in the gang stash.",
            ),
        ),
    ]


def fighter_fields():
    return [
        ("name", models.CharField(max_length=255)),
        ("label", models.CharField(blank=True, max_length=255)),
        ("fighter_class", models.CharField(blank=True, max_length=255)),
        ("fighter_sub_type", models.CharField(blank=True, max_length=255)),
        (
            "credits",
            models.PositiveIntegerField(
                default=0, help_text="Base cost paid when the fighter was hired."
            ),
        ),
        (
            "cost_adjustment",
            models.IntegerField(
                default=0, help_text="Manual adjustment added to the fighter's cost."
            ),
        ),
        ("xp", models.IntegerField(default=0)),
        ("kills", models.PositiveIntegerField(default=0)),
        (
            "kill_count",
            models.PositiveIntegerField(
                default=0,
                help_text="Spyrer kill tally, tracked separately from kills.",
            ),
        ),
        ("killed", models.BooleanField(default=False)),
        ("retired", models.BooleanField(default=False)),
        ("enslaved", models.BooleanField(default=False)),
        ("starved", models.BooleanField(default=False)),
        ("captured", models.BooleanField(default=False)),
        ("recovery", models.BooleanField(default=False)),
        ("note", models.TextField(blank=True)),
        ("note_backstory", models.TextField(blank=True)),
        ("special_rules", models.JSONField(blank=True, default=list)),
    ]


def equipment_fields():
    return [
        ("cost", models.IntegerField(default=0)),
        ("purchase_cost", models.IntegerField(default=0)),
        ("is_master_crafted", models.BooleanField(default=False)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("content", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Gang",
            fields=[*base_fields(), owner_field(), *gang_fields()],
            options={
                "verbose_name": "Gang",
                "verbose_name_plural": "Gangs",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Fighter",
            fields=[
                *base_fields(),
                owner_field(),
                *fighter_fields(),
                (
                    "gang",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fighters",
                        to="core.gang",
                    ),
                ),
                (
                    "fighter_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fighters",
                        to="content.contentfightertype",
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter",
                "verbose_name_plural": "Fighters",
                "ordering": ["gang", "name"],
            },
        ),
        migrations.CreateModel(
            name="FighterEquipment",
            fields=[
                *base_fields(),
                owner_field(),
                *equipment_fields(),
                (
                    "fighter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="equipment",
                        to="core.fighter",
                    ),
                ),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fighter_equipment",
                        to="content.contentequipment",
                    ),
                ),
                (
                    "target_equipment",
                    models.ForeignKey(
                        blank=True,
                        help_text="The equipment this item is mounted on.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="mounted_equipment",
                        to="core.fighterequipment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter Equipment",
                "verbose_name_plural": "Fighter Equipment",
                "ordering": ["created"],
            },
        ),
        migrations.CreateModel(
            name="GangStashItem",
            fields=[
                *base_fields(),
                owner_field(),
                ("cost", models.IntegerField(default=0)),
                ("is_master_crafted", models.BooleanField(default=False)),
                (
                    "gang",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stash_items",
                        to="core.gang",
                    ),
                ),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stash_items",
                        to="content.contentequipment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Stash Item",
                "verbose_name_plural": "Stash Items",
                "ordering": ["created"],
            },
        ),
        migrations.CreateModel(
            name="FighterEffect",
            fields=[
                *base_fields(),
                owner_field(),
                ("effect_name", models.CharField(max_length=255)),
                ("type_specific_data", models.JSONField(blank=True, default=dict)),
                (
                    "fighter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="effects",
                        to="core.fighter",
                    ),
                ),
                (
                    "effect_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fighter_effects",
                        to="content.contenteffecttype",
                    ),
                ),
                (
                    "fighter_equipment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="effects",
                        to="core.fighterequipment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter Effect",
                "verbose_name_plural": "Fighter Effects",
                "ordering": ["created"],
            },
        ),
        migrations.CreateModel(
            name="FighterEffectModifier",
            fields=[
                *base_fields(),
                ("stat_name", models.CharField(db_index=True, max_length=100)),
                ("numeric_value", models.IntegerField()),
                (
                    "effect",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modifiers",
                        to="core.fightereffect",
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter Effect Modifier",
                "verbose_name_plural": "Fighter Effect Modifiers",
                "ordering": ["created"],
            },
        ),
        migrations.CreateModel(
            name="FighterSkill",
            fields=[
                *base_fields(),
                owner_field(),
                ("xp_cost", models.PositiveIntegerField(default=0)),
                ("credits_increase", models.IntegerField(default=0)),
                ("is_advance", models.BooleanField(default=False)),
                (
                    "fighter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="skills",
                        to="core.fighter",
                    ),
                ),
                (
                    "skill",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="fighter_skills",
                        to="content.contentskill",
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter Skill",
                "verbose_name_plural": "Fighter Skills",
                "ordering": ["created"],
                "unique_together": {("fighter", "skill")},
            },
        ),
        migrations.CreateModel(
            name="FighterExoticBeast",
            fields=[
                *base_fields(),
                owner_field(),
                (
                    "owner_fighter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="owned_beasts",
                        to="core.fighter",
                    ),
                ),
                (
                    "pet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="beast_owner_links",
                        to="core.fighter",
                    ),
                ),
                (
                    "fighter_equipment",
                    models.ForeignKey(
                        blank=True,
                        help_text="The equipment that granted this beast, if any.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="granted_beasts",
                        to="core.fighterequipment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Exotic Beast",
                "verbose_name_plural": "Exotic Beasts",
            },
        ),
        migrations.CreateModel(
            name="FighterLog",
            fields=[
                *base_fields(),
                (
                    "fighter_id",
                    models.UUIDField(blank=True, db_index=True, null=True),
                ),
                ("fighter_name", models.CharField(blank=True, max_length=255)),
                (
                    "action_type",
                    models.CharField(
                        choices=[
                            ("fighter_killed", "Fighter killed"),
                            ("fighter_resurrected", "Fighter resurrected"),
                            ("fighter_retired", "Fighter retired"),
                            ("fighter_unretired", "Fighter unretired"),
                            ("fighter_enslaved", "Fighter sold to the guilders"),
                            ("fighter_rescued", "Fighter rescued"),
                            ("fighter_starved", "Fighter starved"),
                            ("fighter_fed", "Fighter fed"),
                            ("fighter_recovered", "Fighter recovered"),
                            ("fighter_sent_to_recovery", "Fighter sent to recovery"),
                            ("fighter_captured", "Fighter captured"),
                            ("fighter_released", "Fighter released"),
                            ("fighter_removed", "Fighter removed"),
                            ("fighter_xp_changed", "XP changed"),
                            ("fighter_ooa_changed", "Kills changed by OOA"),
                            ("fighter_kills_changed", "Kills changed"),
                            ("fighter_cost_adjusted", "Cost adjusted"),
                            ("advancement_added", "Advancement added"),
                            ("advancement_removed", "Advancement removed"),
                            ("equipment_purchased", "Equipment purchased"),
                            ("equipment_sold", "Equipment sold"),
                            ("equipment_stashed", "Equipment moved to stash"),
                        ],
                        max_length=50,
                    ),
                ),
                ("old_value", models.CharField(blank=True, max_length=255)),
                ("new_value", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "gang",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="fighter_logs",
                        to="core.gang",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fighter_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Fighter Log",
                "verbose_name_plural": "Fighter Logs",
                "ordering": ["-created"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalGang",
            fields=[*historical_base_fields(), *gang_fields(), *history_fields()],
            options=historical_options("Gang", "Gangs"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalFighter",
            fields=[
                *historical_base_fields(),
                *fighter_fields(),
                ("gang", historical_fk("core.gang")),
                ("fighter_type", historical_fk("content.contentfightertype")),
                *history_fields(),
            ],
            options=historical_options("Fighter", "Fighters"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalFighterEquipment",
            fields=[
                *historical_base_fields(),
                *equipment_fields(),
                ("fighter", historical_fk("core.fighter")),
                ("equipment", historical_fk("content.contentequipment")),
                (
                    "target_equipment",
                    historical_fk(
                        "core.fighterequipment",
                        help_text="The equipment this item is mounted on.",
                    ),
                ),
                *history_fields(),
            ],
            options=historical_options("Fighter Equipment", "Fighter Equipment"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalGangStashItem",
            fields=[
                *historical_base_fields(),
                ("cost", models.IntegerField(default=0)),
                ("is_master_crafted", models.BooleanField(default=False)),
                ("gang", historical_fk("core.gang")),
                ("equipment", historical_fk("content.contentequipment")),
                *history_fields(),
            ],
            options=historical_options("Stash Item", "Stash Items"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalFighterEffect",
            fields=[
                *historical_base_fields(),
                ("effect_name", models.CharField(max_length=255)),
                ("type_specific_data", models.JSONField(blank=True, default=dict)),
                ("fighter", historical_fk("core.fighter")),
                ("effect_type", historical_fk("content.contenteffecttype")),
                ("fighter_equipment", historical_fk("core.fighterequipment")),
                *history_fields(),
            ],
            options=historical_options("Fighter Effect", "Fighter Effects"),
            bases=HISTORICAL_BASES,
        ),
        migrations.CreateModel(
            name="HistoricalFighterSkill",
            fields=[
                *historical_base_fields(),
                ("xp_cost", models.PositiveIntegerField(default=0)),
                ("credits_increase", models.IntegerField(default=0)),
                ("is_advance", models.BooleanField(default=False)),
                ("fighter", historical_fk("core.fighter")),
                ("skill", historical_fk("content.contentskill")),
                *history_fields(),
            ],
            options=historical_options("Fighter Skill", "Fighter Skills"),
            bases=HISTORICAL_BASES,
        ),
    ]
