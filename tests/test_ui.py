"""Tests for the HTML fragments rendered by the Streamlit page."""

from app.main import friend_row_html
from src.models.friend import Friend


class TestFriendRowHtml:
    """Friend names are user input and must not be rendered as markup."""

    def test_name_is_escaped(self):
        friend = Friend(id=1, name="<img src=x onerror=alert(1)>", image="img", balance=5)
        row = friend_row_html(friend, "$")
        assert "<img" not in row
        assert "&lt;img src=x onerror=alert(1)&gt;" in row

    def test_balance_line_is_escaped(self):
        friend = Friend(id=1, name="Tom & <b>Jerry</b>", image="img", balance=-7)
        row = friend_row_html(friend, "$")
        assert "You owe Tom &amp; &lt;b&gt;Jerry&lt;/b&gt; $7" in row
        assert "<b>" not in row

    def test_row_classes(self):
        friend = Friend(id=1, name="Sarah", image="img", balance=20)
        row = friend_row_html(friend, "$", is_selected=True)
        assert 'class="selected-row"' in row
        assert 'class="green"' in row
        assert "Sarah owes you $20" in row
