from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from gangroster.core.models import (
    Fighter,
    FighterEffect,
    FighterEffectModifier,
    FighterEquipment,
    FighterLog,
    FighterSkill,
    Gang,
    GangStashItem,
)


class FighterInline(admin.TabularInline):
    model = Fighter
    fields = ["name", "fighter_type", "xp", "killed", "retired", "enslaved"]
    show_change_link = True
    extra = 0


class GangStashItemInline(admin.TabularInline):
    model = GangStashItem
    extra = 0


@admin.register(Gang)
class GangAdmin(SimpleHistoryAdmin):
    list_display = ["name", "owner", "credits", "rating", "meat", "stash_value"]
    search_fields = ["name", "owner__username"]
    inlines = [FighterInline, GangStashItemInline]


class FighterEquipmentInline(admin.TabularInline):
    model = FighterEquipment
    fk_name = "fighter"
    extra = 0


class FighterSkillInline(admin.TabularInline):
    model = FighterSkill
    extra = 0


@admin.register(Fighter)
class FighterAdmin(SimpleHistoryAdmin):
    list_display = [
        "name",
        "gang",
        "fighter_type",
        "xp",
        "killed",
        "retired",
        "enslaved",
        "captured",
    ]
    list_filter = ["killed", "retired", "enslaved", "starved", "recovery", "captured"]
    search_fields = ["name", "gang__name"]
    inlines = [FighterEquipmentInline, FighterSkillInline]


class FighterEffectModifierInline(admin.TabularInline):
    model = FighterEffectModifier
    extra = 0


@admin.register(FighterEffect)
class FighterEffectAdmin(SimpleHistoryAdmin):
    list_display = ["effect_name", "fighter", "effect_type"]
    search_fields = ["effect_name", "fighter__name"]
    inlines = [FighterEffectModifierInline]


@admin.register(FighterLog)
class FighterLogAdmin(admin.ModelAdmin):
    list_display = ["created", "gang", "fighter_name", "action_type", "user"]
    list_filter = ["action_type"]
    search_fields = ["fighter_name", "description"]
    readonly_fields = [f.name for f in FighterLog._meta.fields]
