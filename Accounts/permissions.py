from rest_framework.permissions import BasePermission


class IsCustomer(BasePermission):
    message = "Access denied"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_customer)


class IsBackOffice(BasePermission):
    """Employees and admins."""
    message = "Access denied"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_backoffice)


class IsAdmin(BasePermission):
    message = "Access denied"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)
