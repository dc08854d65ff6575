from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Amenity, Booking, Hostel, HostelImage, LandlordProfile, Notification, Report, Review, Room, User


@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
	list_display = ('username', 'email', 'role', 'status', 'is_staff')
	list_filter = BaseUserAdmin.list_filter + ('role', 'status')
	fieldsets = BaseUserAdmin.fieldsets + (
		('Marketplace', {'fields': ('role', 'status', 'status_reason', 'phone')}),
	)
	add_fieldsets = BaseUserAdmin.add_fieldsets + (
		(
			'Marketplace',
			{
				'classes': ('wide',),
				'fields': ('role', 'phone'),
			},
		),
	)


@admin.register(LandlordProfile)
class LandlordProfileAdmin(admin.ModelAdmin):
	list_display = ('user', 'business_name', 'verification_status', 'verified_at')
	list_filter = ('verification_status',)
	search_fields = ('user__username', 'user__email', 'business_name')


class RoomInline(admin.TabularInline):
	model = Room
	extra = 0


class AmenityInline(admin.TabularInline):
	model = Amenity
	extra = 0


class HostelImageInline(admin.TabularInline):
	model = HostelImage
	extra = 0


@admin.register(Hostel)
class HostelAdmin(admin.ModelAdmin):
	list_display = ('name', 'landlord', 'hostel_type', 'city', 'verification_status', 'is_active')
	list_filter = ('hostel_type', 'verification_status', 'is_active', 'county')
	search_fields = ('name', 'city', 'landlord__user__username', 'landlord__user__email')
	inlines = (AmenityInline, HostelImageInline, RoomInline)


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
	list_display = ('hostel', 'reporter', 'reason', 'status', 'created_at')
	list_filter = ('status', 'reason')


admin.site.register(Booking)
admin.site.register(Review)
admin.site.register(Notification)
