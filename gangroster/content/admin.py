from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from gangroster.content.models import (
    ContentEffectCategory,
    ContentEffectType,
    ContentEffectTypeModifier,
    ContentEquipment,
    ContentFighterType,
    ContentSkill,
    ContentSkillCategory,
)


class ContentEffectTypeModifierInline(admin.TabularInline):
    model = ContentEffectTypeModifier
    extra = 0


@admin.register(ContentEffectType)
class ContentEffectTypeAdmin(SimpleHistoryAdmin):
    list_display = ["name", "category"]
    list_filter = ["category"]
    search_fields = ["name"]
    inlines = [ContentEffectTypeModifierInline]


@admin.register(ContentEquipment)
class ContentEquipmentAdmin(SimpleHistoryAdmin):
    list_display = ["name", "equipment_type", "cost"]
    list_filter = ["equipment_type"]
    search_fields = ["name"]


@admin.register(ContentFighterType)
class ContentFighterTypeAdmin(SimpleHistoryAdmin):
    list_display = ["name", "fighter_class", "cost", "is_spyrer"]
    search_fields = ["name"]


admin.site.register(ContentEffectCategory, SimpleHistoryAdmin)
admin.site.register(ContentSkillCategory, SimpleHistoryAdmin)
admin.site.register(ContentSkill, SimpleHistoryAdmin)
