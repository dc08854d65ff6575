from django import forms
from django.db.models.functions import Lower

from ..lifecycle import AmenityCategory
from ..models import Amenity, Hostel, HostelImage, Room


class AmenityForm(forms.Form):
    name = forms.CharField(max_length=100)
    category = forms.ChoiceField(choices=AmenityCategory.choices)

    def clean_name(self):
        return self.cleaned_data["name"].strip()


class HostelImageForm(forms.Form):
    url = forms.URLField(max_length=500)
    caption = forms.CharField(max_length=200, required=False)
    is_primary = forms.BooleanField(required=False)


class HostelForm(forms.ModelForm):
    """Validates a landlord's hostel submission or edit.

    Amenities and images arrive as lists of dicts. ``None`` leaves the stored
    ones untouched on edit; a new hostel needs at least one amenity.
    """

    class Meta:
        model = Hostel
        fields = [
            "name",
            "description",
            "street",
            "city",
            "county",
            "postal_code",
            "landmark",
            "latitude",
            "longitude",
            "distance_from_campus",
            "university_name",
            "hostel_type",
            "min_price",
            "max_price",
        ]

    def __init__(self, *args, landlord=None, amenities=None, images=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.landlord = landlord
        self.amenity_data = amenities
        self.image_data = images
        self.cleaned_amenities: list[dict] | None = None
        self.cleaned_images: list[dict] | None = None
        self.fields["name"].min_length = 3

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if len(name) < 3:
            raise forms.ValidationError("Name must be at least 3 characters.")
        return name

    def clean_description(self):
        description = self.cleaned_data["description"].strip()
        if not description:
            raise forms.ValidationError("This field is required.")
        return description

    def clean_distance_from_campus(self):
        distance = self.cleaned_data.get("distance_from_campus")
        if distance is None:
            raise forms.ValidationError("Distance from campus is required.")
        if distance < 0:
            raise forms.ValidationError("Distance cannot be negative.")
        if distance > 50:
            raise forms.ValidationError("Distance seems unrealistic.")
        return distance

    def clean_min_price(self):
        min_price = self.cleaned_data.get("min_price")
        if min_price is not None and min_price < 0:
            raise forms.ValidationError("Price cannot be negative.")
        return min_price

    def clean_latitude(self):
        latitude = self.cleaned_data.get("latitude")
        if latitude is not None and not -90 <= latitude <= 90:
            raise forms.ValidationError("Latitude must be between -90 and 90.")
        return latitude

    def clean_longitude(self):
        longitude = self.cleaned_data.get("longitude")
        if longitude is not None and not -180 <= longitude <= 180:
            raise forms.ValidationError("Longitude must be between -180 and 180.")
        return longitude

    def clean(self):
        cleaned_data = super().clean()
        min_price = cleaned_data.get("min_price")
        max_price = cleaned_data.get("max_price")
        if min_price is not None and max_price is not None and max_price < min_price:
            self.add_error("max_price", "Maximum price must be greater than or equal to minimum price.")

        latitude = cleaned_data.get("latitude")
        longitude = cleaned_data.get("longitude")
        if (latitude is None) != (longitude is None) and "latitude" not in self.errors and "longitude" not in self.errors:
            self.add_error("latitude", "Latitude and longitude must be provided together.")

        self._clean_amenities()
        self._clean_images()
        return cleaned_data

    def _clean_amenities(self):
        if self.amenity_data is None:
            if not self.instance.pk:
                self.add_error(None, forms.ValidationError("At least one amenity is required.", code="amenities"))
            return
        cleaned = []
        for entry in self.amenity_data:
            form = AmenityForm(entry if isinstance(entry, dict) else {"name": entry})
            if not form.is_valid():
                self.add_error(None, forms.ValidationError("Each amenity needs a name and a valid category."))
                return
            cleaned.append(form.cleaned_data)
        if not cleaned:
            self.add_error(None, forms.ValidationError("At least one amenity is required."))
            return
        self.cleaned_amenities = cleaned

    def _clean_images(self):
        if self.image_data is None:
            return
        cleaned = []
        for entry in self.image_data:
            form = HostelImageForm(entry if isinstance(entry, dict) else {"url": entry})
            if not form.is_valid():
                self.add_error(None, forms.ValidationError("Each image needs a valid URL."))
                return
            cleaned.append(form.cleaned_data)
        primaries = [image for image in cleaned if image["is_primary"]]
        if len(primaries) > 1:
            self.add_error(None, forms.ValidationError("Only one image can be the primary image."))
            return
        if cleaned and not primaries:
            cleaned[0]["is_primary"] = True
        self.cleaned_images = cleaned

    def save(self, commit=True):
        hostel = super().save(commit=False)
        if not hostel.pk:
            if self.landlord is None:
                raise ValueError("HostelForm.save() requires a landlord profile for new hostels")
            hostel.landlord = self.landlord
        if commit:
            hostel.save()
            self.save_related(hostel)
        return hostel

    def save_related(self, hostel: Hostel) -> None:
        if self.cleaned_amenities is not None:
            hostel.amenities.all().delete()
            Amenity.objects.bulk_create(
                Amenity(hostel=hostel, name=item["name"], category=item["category"])
                for item in self.cleaned_amenities
            )
        if self.cleaned_images is not None:
            hostel.images.all().delete()
            for item in self.cleaned_images:
                HostelImage.objects.create(
                    hostel=hostel,
                    url=item["url"],
                    caption=item.get("caption") or "",
                    is_primary=item["is_primary"],
                )


class RoomForm(forms.ModelForm):
    class Meta:
        model = Room
        fields = ["room_number", "room_type", "description", "capacity", "monthly_price", "deposit"]

    def __init__(self, *args, hostel=None, **kwargs):
        super().__init__(*args, **kwargs)
        if hostel is None:
            raise ValueError("RoomForm requires a Hostel instance")
        self.hostel = hostel
        self.fields["deposit"].required = False

    def clean_room_number(self):
        room_number = self.cleaned_data["room_number"].strip()
        duplicates = (
            Room.objects.annotate(number_lower=Lower("room_number"))
            .filter(hostel=self.hostel, is_active=True, number_lower=room_number.lower())
            .exclude(pk=self.instance.pk)
        )
        if duplicates.exists():
            raise forms.ValidationError("Room number already exists in this hostel.")
        return room_number

    def clean_monthly_price(self):
        price = self.cleaned_data.get("monthly_price")
        if price is not None and price < 0:
            raise forms.ValidationError("Price cannot be negative.")
        return price

    def clean_deposit(self):
        deposit = self.cleaned_data.get("deposit")
        if deposit is None:
            return 0
        if deposit < 0:
            raise forms.ValidationError("Deposit cannot be negative.")
        return deposit

    def save(self, commit=True):
        room = super().save(commit=False)
        room.hostel = self.hostel
        if commit:
            room.save()
        return room
