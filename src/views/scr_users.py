from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import quote

from textual.binding import Binding

from client.models import User
from client.session import UserSession
from views.modal_record_detail import RecordDetailModal
from views.modal_record_form import FormField
from views.scr_collection import CollectionScreen


class UsersScreen(CollectionScreen):
    BINDINGS = [
        Binding("v", "view", "View Posts", show=True),
    ]

    record_type = User
    noun = "user"
    form_fields = [
        FormField("name", "Name"),
        FormField("email", "Email"),
    ]

    def make_session(self) -> UserSession:
        return UserSession(self.app.state.users)

    def prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        name = fields.get("name", "")
        return {
            **fields,
            "avatar": f"https://ui-avatars.com/api/?name={quote(name)}&background=random&color=fff",
            "createdAt": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        }

    def action_view(self) -> None:
        user = self.selected_record()
        if user is None:
            return
        self.app.push_screen(
            RecordDetailModal(
                f"User: {user.name}",
                user,
                related_title="Posts",
                load_related=lambda: self.app.state.users.get_user_posts(user.id),
                describe_related=lambda post: f"{post.title} ({post.likes} likes)",
            )
        )
