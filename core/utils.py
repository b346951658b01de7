from rest_framework import permissions


class IsCustomer(permissions.BasePermission):
    message = "This workspace is designed for customers to manage their requests."

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_customer


class IsWorker(permissions.BasePermission):
    message = "This workspace is designed for service providers."

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_worker


class IsSeller(permissions.BasePermission):
    message = "Only sellers can manage a shop."

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_seller


class IsAdmin(permissions.BasePermission):
    message = "You do not have administrative privileges to access this area."

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return request.user.is_superuser
