"""
Add-Friend Form

Holds the two text inputs of the form and turns them into a Friend on
submission. Invalid submissions are ignored: no friend is produced and
the inputs are kept as typed.
"""

from typing import Optional

from src.models.friend import NAME_MAX_LENGTH, Friend
from src.state.identity import IdGenerator


DEFAULT_AVATAR_URL = "https://i.pravatar.cc/48"


class AddFriendForm:
    """Name and image inputs for a new friend."""

    def __init__(self, default_image: str = DEFAULT_AVATAR_URL):
        self._default_image = default_image
        self.name = ""
        self.image = default_image

    @property
    def default_image(self) -> str:
        return self._default_image

    @property
    def name_too_long(self) -> bool:
        return len(self.name.strip()) > NAME_MAX_LENGTH

    @property
    def is_complete(self) -> bool:
        # Whitespace-only input counts as empty; Friend strips it anyway
        return (
            bool(self.name.strip())
            and not self.name_too_long
            and bool(self.image.strip())
        )

    def reset(self) -> None:
        self.name = ""
        self.image = self._default_image

    def submit(self, id_generator: IdGenerator) -> Optional[Friend]:
        """
        Build a friend from the current inputs.

        The id is appended to the image URL so identical avatar URLs
        still render as distinct images. Returns None if either input
        is empty or the name is longer than NAME_MAX_LENGTH; no id is
        drawn in that case.
        """
        if not self.is_complete:
            return None

        friend_id = id_generator.next()
        friend = Friend(
            id=friend_id,
            name=self.name,
            image=f"{self.image.strip()}?={friend_id}",
            balance=0,
        )
        self.reset()
        return friend
