from django.db.models.signals import post_save
from django.dispatch import receiver

from .lifecycle import Role
from .models import LandlordProfile, User


@receiver(post_save, sender=User)
def ensure_landlord_profile(sender, instance: User, created: bool, **kwargs):
    """Every landlord account owns exactly one verification profile."""
    if instance.role == Role.LANDLORD:
        LandlordProfile.objects.get_or_create(user=instance)
