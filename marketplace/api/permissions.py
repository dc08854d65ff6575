from rest_framework.permissions import BasePermission

from ..lifecycle import Role


class _RolePermission(BasePermission):
    role: str = ""
    message = "You are not permitted to perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_operational
            and user.has_role(self.role)
        )


class IsStudent(_RolePermission):
    role = Role.STUDENT


class IsLandlord(_RolePermission):
    role = Role.LANDLORD


class IsAdmin(_RolePermission):
    role = Role.ADMIN


class IsActiveAccount(BasePermission):
    message = "You are not permitted to perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_operational)
