from django.contrib import admin
from .models import ChatRoom, Message, Proposal


@admin.register(ChatRoom)
class ChatRoomAdmin(admin.ModelAdmin):
    list_display = ('id', 'job', 'customer', 'worker', 'created_at')
    search_fields = ('id', 'job__title', 'customer__username', 'worker__username')


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('room', 'sender', 'message_type', 'created_at')
    list_filter = ('message_type',)
    search_fields = ('room__id', 'sender__username', 'text')


@admin.register(Proposal)
class ProposalAdmin(admin.ModelAdmin):
    list_display = ('room', 'proposed_by', 'amount', 'status', 'created_at')
    list_filter = ('status',)
