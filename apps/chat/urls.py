from django.urls import path
from .views import (
    ChatRoomListView, ChatRoomOpenView, ChatRoomDetailView, MessageListCreateView,
    ProposalListCreateView, ProposalRespondView, HireWorkerView, ContactDetailsView
)

urlpatterns = [
    path('rooms/', ChatRoomListView.as_view(), name='chat_rooms'),
    path('jobs/<int:job_id>/rooms/', ChatRoomOpenView.as_view(), name='chat_room_open'),
    path('rooms/<str:room_id>/', ChatRoomDetailView.as_view(), name='chat_room_detail'),
    path('rooms/<str:room_id>/messages/', MessageListCreateView.as_view(), name='chat_messages'),
    path('rooms/<str:room_id>/proposals/', ProposalListCreateView.as_view(), name='chat_proposals'),
    path('rooms/<str:room_id>/proposals/<int:proposal_id>/respond/', ProposalRespondView.as_view(), name='chat_proposal_respond'),
    path('rooms/<str:room_id>/hire/', HireWorkerView.as_view(), name='chat_hire'),
    path('rooms/<str:room_id>/contact/', ContactDetailsView.as_view(), name='chat_contact'),
]
