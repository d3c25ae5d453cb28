from datetime import datetime, timezone
from typing import Any, Dict

from textual.binding import Binding

from client.models import Post
from client.session import PostSession
from views.modal_record_detail import RecordDetailModal
from views.modal_record_form import FormField
from views.scr_collection import CollectionScreen


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class PostsScreen(CollectionScreen):
    BINDINGS = [
        Binding("v", "view", "View Comments", show=True),
    ]

    record_type = Post
    noun = "post"
    form_fields = [
        FormField("title", "Title"),
        FormField("content", "Content"),
        FormField("userId", "Author ID", "integer"),
        FormField("likes", "Likes", "integer"),
    ]

    def make_session(self) -> PostSession:
        return PostSession(self.app.state.posts)

    def prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        stamp = _now()
        author = self.app.state.user
        defaults = {"likes": 0, "userId": author.id if author else None}
        return {**defaults, **fields, "createdAt": stamp, "updatedAt": stamp}

    def action_view(self) -> None:
        post = self.selected_record()
        if post is None:
            return
        self.app.push_screen(
            RecordDetailModal(
                f"Post: {post.title}",
                post,
                related_title="Comments",
                load_related=lambda: self.app.state.posts.get_post_comments(post.id),
                describe_related=lambda comment: comment.content,
            )
        )
