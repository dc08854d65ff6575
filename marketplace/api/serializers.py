"""Read-side serializers. Field names follow the camelCase JSON contract."""

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from .. import projections
from ..lifecycle import BookingStatus
from ..models import Amenity, Booking, Hostel, HostelImage, LandlordProfile, Notification, Report, Review, Room, User


def money(value) -> str:
    return str(value.quantize(projections.CENTS, rounding=ROUND_HALF_UP))


class UserSerializer(serializers.ModelSerializer):
    """Serializer exposing the current user's public profile information."""

    firstName = serializers.CharField(source="first_name", read_only=True)
    lastName = serializers.CharField(source="last_name", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "firstName", "lastName", "displayName", "role", "status", "phone")
        read_only_fields = fields


class LandlordProfileSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    name = serializers.CharField(source="user.display_name", read_only=True)
    businessName = serializers.CharField(source="business_name", read_only=True)
    verificationStatus = serializers.CharField(source="verification_status", read_only=True)
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True)
    verifiedAt = serializers.DateTimeField(source="verified_at", read_only=True)

    class Meta:
        model = LandlordProfile
        fields = ("id", "userId", "name", "businessName", "verificationStatus", "rejectionReason", "verifiedAt")
        read_only_fields = fields


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ("name", "category")


class HostelImageSerializer(serializers.ModelSerializer):
    isPrimary = serializers.BooleanField(source="is_primary", read_only=True)

    class Meta:
        model = HostelImage
        fields = ("url", "caption", "isPrimary")


class RoomSerializer(serializers.ModelSerializer):
    hostelId = serializers.IntegerField(source="hostel_id", read_only=True)
    roomNumber = serializers.CharField(source="room_number", read_only=True)
    roomType = serializers.CharField(source="room_type", read_only=True)
    monthlyPrice = serializers.DecimalField(source="monthly_price", max_digits=10, decimal_places=2, read_only=True)
    isAvailable = serializers.BooleanField(source="is_available", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = Room
        fields = (
            "id",
            "hostelId",
            "roomNumber",
            "roomType",
            "description",
            "capacity",
            "monthlyPrice",
            "deposit",
            "isAvailable",
            "isActive",
        )
        read_only_fields = fields


class HostelSummarySerializer(serializers.ModelSerializer):
    """Catalog card: listing basics plus the derived aggregates."""

    hostelType = serializers.CharField(source="hostel_type", read_only=True)
    minPrice = serializers.DecimalField(source="min_price", max_digits=10, decimal_places=2, read_only=True)
    maxPrice = serializers.DecimalField(source="max_price", max_digits=10, decimal_places=2, read_only=True)
    priceRange = serializers.CharField(source="price_range", read_only=True)
    effectiveStatus = serializers.CharField(source="effective_status", read_only=True)
    verificationStatus = serializers.CharField(source="verification_status", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    primaryImage = serializers.CharField(source="primary_image", read_only=True)
    rating = serializers.SerializerMethodField()
    occupancy = serializers.SerializerMethodField()

    class Meta:
        model = Hostel
        fields = (
            "id",
            "name",
            "city",
            "county",
            "hostelType",
            "minPrice",
            "maxPrice",
            "currency",
            "priceRange",
            "effectiveStatus",
            "verificationStatus",
            "isActive",
            "primaryImage",
            "rating",
            "occupancy",
        )
        read_only_fields = fields

    def get_rating(self, obj):
        summary = projections.rating_summary(review.rating for review in obj.reviews.all())
        return {"averageRating": summary.average_rating, "totalReviews": summary.total_reviews, "label": summary.label}

    def get_occupancy(self, obj):
        occupancy = projections.room_occupancy(obj.rooms.all())
        return {
            "totalRooms": occupancy.total_rooms,
            "availableRooms": occupancy.available_rooms,
            "occupiedRooms": occupancy.occupied_rooms,
        }


class HostelDetailSerializer(HostelSummarySerializer):
    """Full listing. ``rooms`` and ``landlord`` come from the detail service in context."""

    postalCode = serializers.CharField(source="postal_code", read_only=True)
    distanceFromCampus = serializers.DecimalField(
        source="distance_from_campus", max_digits=5, decimal_places=2, read_only=True
    )
    universityName = serializers.CharField(source="university_name", read_only=True)
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True)
    disableReason = serializers.CharField(source="disable_reason", read_only=True)
    amenities = AmenitySerializer(many=True, read_only=True)
    images = HostelImageSerializer(many=True, read_only=True)
    rooms = serializers.SerializerMethodField()
    landlord = serializers.SerializerMethodField()

    class Meta(HostelSummarySerializer.Meta):
        fields = HostelSummarySerializer.Meta.fields + (
            "description",
            "street",
            "postalCode",
            "landmark",
            "latitude",
            "longitude",
            "distanceFromCampus",
            "universityName",
            "rejectionReason",
            "disableReason",
            "amenities",
            "images",
            "rooms",
            "landlord",
        )
        read_only_fields = fields

    def get_rooms(self, obj):
        detail = self.context.get("detail")
        rooms = detail.rooms() if detail is not None else obj.rooms.filter(is_active=True)
        return RoomSerializer(rooms, many=True).data

    def get_landlord(self, obj):
        detail = self.context.get("detail")
        if detail is None:
            return {"name": obj.landlord.user.display_name}
        return detail.landlord_contact()


class BookingSerializer(serializers.ModelSerializer):
    startDate = serializers.DateField(source="start_date", read_only=True)
    endDate = serializers.DateField(source="end_date", read_only=True)
    studentId = serializers.IntegerField(source="student_id", read_only=True)
    studentName = serializers.CharField(source="student.display_name", read_only=True)
    decisionReason = serializers.CharField(source="decision_reason", read_only=True)
    cancellationReason = serializers.CharField(source="cancellation_reason", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    room = serializers.SerializerMethodField()
    hostel = serializers.SerializerMethodField()
    estimatedCost = serializers.SerializerMethodField()
    allowedActions = serializers.ListField(source="allowed_actions", read_only=True)
    landlordContact = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = (
            "id",
            "status",
            "startDate",
            "endDate",
            "studentId",
            "studentName",
            "room",
            "hostel",
            "estimatedCost",
            "decisionReason",
            "cancellationReason",
            "allowedActions",
            "landlordContact",
            "createdAt",
        )
        read_only_fields = fields

    def get_room(self, obj):
        return {"id": obj.room_id, "roomNumber": obj.room.room_number, "roomType": obj.room.room_type}

    def get_hostel(self, obj):
        hostel = obj.room.hostel
        return {"id": hostel.pk, "name": hostel.name, "city": hostel.city}

    def get_estimatedCost(self, obj):
        return money(obj.estimated_cost)

    def get_landlordContact(self, obj):
        # Only an approved booking reveals how to reach the landlord.
        if obj.status != BookingStatus.APPROVED:
            return None
        landlord = obj.room.hostel.landlord.user
        return {"name": landlord.display_name, "email": landlord.email, "phone": landlord.phone}


class ReviewSerializer(serializers.ModelSerializer):
    hostelId = serializers.IntegerField(source="hostel_id", read_only=True)
    studentId = serializers.IntegerField(source="student_id", read_only=True)
    studentName = serializers.CharField(source="student.display_name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Review
        fields = ("id", "hostelId", "studentId", "studentName", "rating", "comment", "createdAt", "updatedAt")
        read_only_fields = fields


class ReportSerializer(serializers.ModelSerializer):
    hostelId = serializers.IntegerField(source="hostel_id", read_only=True)
    hostelName = serializers.CharField(source="hostel.name", read_only=True)
    reporterId = serializers.IntegerField(source="reporter_id", read_only=True)
    reporterName = serializers.CharField(source="reporter.display_name", read_only=True)
    adminNotes = serializers.CharField(source="admin_notes", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    reviewedAt = serializers.DateTimeField(source="reviewed_at", read_only=True)
    resolvedAt = serializers.DateTimeField(source="resolved_at", read_only=True)

    class Meta:
        model = Report
        fields = (
            "id",
            "hostelId",
            "hostelName",
            "reporterId",
            "reporterName",
            "reason",
            "description",
            "status",
            "adminNotes",
            "createdAt",
            "reviewedAt",
            "resolvedAt",
        )
        read_only_fields = fields


class NotificationSerializer(serializers.ModelSerializer):
    isRead = serializers.BooleanField(source="is_read", read_only=True)
    readAt = serializers.DateTimeField(source="read_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Notification
        fields = ("id", "title", "message", "type", "isRead", "readAt", "createdAt")
        read_only_fields = fields


class SavedHostelSerializer(serializers.Serializer):
    hostel = HostelSummarySerializer(read_only=True)
    savedAt = serializers.DateTimeField(source="saved_at", read_only=True)
    isAvailable = serializers.BooleanField(source="is_available", read_only=True)
