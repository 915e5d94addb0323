from django.contrib import admin

from trainings.models import Person, SessionAttendee, Training, TrainingSession


class TrainingSessionInline(admin.TabularInline):
    model = TrainingSession
    extra = 0


class SessionAttendeeInline(admin.TabularInline):
    model = SessionAttendee
    extra = 0


@admin.register(Training)
class TrainingAdmin(admin.ModelAdmin):
    list_display = ["topic", "created_by_user_id", "created_at"]
    search_fields = ["topic"]
    readonly_fields = ["version"]
    inlines = [TrainingSessionInline]


@admin.register(TrainingSession)
class TrainingSessionAdmin(admin.ModelAdmin):
    list_display = ["title", "training", "date", "max_attendees"]
    list_filter = ["training"]
    inlines = [SessionAttendeeInline]


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ["full_name", "email", "is_trainer", "membership_id"]
    list_filter = ["is_trainer"]
    search_fields = ["full_name", "email"]
