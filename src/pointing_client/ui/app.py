"""
Pointing Application UI

Main application class for the Scrum pointing terminal UI.
Built using the Textual framework.
"""

import asyncio
import logging
from typing import Any, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.css.query import NoMatches
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Select,
    Static,
)

from ..room_client import RoomClient
from ..schemas import DEVELOPER, SCRUM_MASTER, ParticipantsUpdate, VoteSummary

logger = logging.getLogger(__name__)

CARD_DECK = ["0", "1", "2", "3", "5", "8", "13", "21", "?"]


class ChatLine(Static):
    """Widget for a single team chat line."""

    def __init__(self, sender: str, text: str, is_own_message: bool = False) -> None:
        super().__init__()
        self.sender = sender
        self.line_text = text
        self.is_own_message = is_own_message

    def compose(self) -> ComposeResult:
        prefix = "You" if self.is_own_message else self.sender
        yield Static(f"[bold cyan]{prefix}[/] {self.line_text}", classes="chat-content")


class SystemMessage(Static):
    """Widget for displaying system messages and notifications."""

    def __init__(self, message: str, message_type: str = "info") -> None:
        self.message = message
        self.message_type = message_type
        super().__init__()

    def compose(self) -> ComposeResult:
        color = {
            "info": "blue",
            "success": "green",
            "warning": "yellow",
            "error": "red",
        }.get(self.message_type, "white")
        yield Static(f"[{color}]⚡ {self.message}[/]", classes="system-message")


class JoinScreen(Container):
    """Screen for choosing a server, room, nickname and role."""

    def compose(self) -> ComposeResult:
        yield Static(
            "[bold blue]Scrum Pointing[/]", id="title", classes="screen-title"
        )
        with Vertical(id="join-form"):
            yield Label("Nickname:")
            yield Input(placeholder="Enter your nickname...", id="nickname-input")
            yield Label("Room:")
            yield Input(placeholder="Room name...", id="room-input")
            yield Label("Role:")
            yield Select(
                [(DEVELOPER, DEVELOPER), (SCRUM_MASTER, SCRUM_MASTER)],
                value=DEVELOPER,
                allow_blank=False,
                id="role-select",
            )
            yield Label("Server Address:")
            yield Input(
                placeholder="host:port (e.g., localhost:10000)",
                id="server-address-input",
            )
            yield Button("Join", id="join-btn", variant="primary")
        yield Static("", id="join-status", classes="status-message")


class RoomScreen(Container):
    """Screen for estimating inside a room."""

    def compose(self) -> ComposeResult:
        with Horizontal(id="room-container"):
            with Vertical(id="room-main"):
                yield Static("", id="room-header", classes="room-header")
                with Horizontal(id="story-row"):
                    yield Input(placeholder="Story title...", id="story-input")
                    yield Button("Start", id="start-btn", variant="primary")
                    yield Button("Reveal", id="reveal-btn", variant="success")
                    yield Button("End", id="end-btn", variant="default")
                with Horizontal(id="card-row"):
                    for index, card in enumerate(CARD_DECK):
                        yield Button(card, id=f"card-{index}", classes="card")
                yield ScrollableContainer(id="chat-container")
                with Horizontal(id="chat-input-row"):
                    yield Input(placeholder="Message the team...", id="chat-input")
                    yield Button("Send", id="send-btn", variant="primary")
            with Vertical(id="sidebar"):
                yield Static("[bold]Participants[/]", classes="sidebar-header")
                yield ListView(id="participant-list")
                yield Static("", id="typing-status", classes="typing-status")
                yield Button("🎉", id="haifetti-btn", variant="default")
                yield Button("Logout", id="logout-btn", variant="warning")
                yield Button(
                    "Terminate Room",
                    id="terminate-btn",
                    variant="error",
                    classes="hidden",
                )


class PointingApp(App):
    """Main pointing application."""

    CSS = """
    Screen {
        layout: vertical;
    }

    .screen-title {
        text-align: center;
        padding: 1 0;
        text-style: bold;
    }

    JoinScreen {
        align: center middle;
    }

    #join-form {
        align: center middle;
        padding: 2;
        width: 60;
        height: auto;
    }

    #join-form Input {
        margin: 0 0 1 0;
    }

    #join-form Button {
        margin: 1 0 0 0;
        width: 100%;
    }

    .status-message {
        text-align: center;
        padding: 1;
    }

    RoomScreen {
        height: 100%;
    }

    #room-container {
        height: 100%;
    }

    #room-main {
        width: 3fr;
    }

    #sidebar {
        width: 1fr;
        border-left: solid $primary;
        padding: 0 1;
    }

    .sidebar-header {
        padding: 1 0;
        text-align: center;
    }

    #participant-list {
        height: 1fr;
    }

    #sidebar Button {
        width: 100%;
        margin: 1 0 0 0;
    }

    .room-header {
        padding: 1;
        background: $surface;
        text-align: center;
    }

    #story-row, #card-row, #chat-input-row {
        height: 3;
        padding: 0 1;
    }

    #story-input, #chat-input {
        width: 1fr;
    }

    .card {
        min-width: 6;
        margin: 0 1 0 0;
    }

    .card.selected {
        background: $accent;
    }

    #chat-container {
        height: 1fr;
        padding: 1;
    }

    .system-message {
        text-align: center;
        text-style: italic;
    }

    .typing-status {
        color: $text-muted;
        height: 1;
    }

    .hidden {
        display: none;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("escape", "go_back", "Logout", show=True),
    ]

    def __init__(
        self, server_address: str = "", nickname: str = "", room: str = ""
    ) -> None:
        """
        Initialize the pointing application.

        Args:
            server_address: Pre-filled server address
            nickname: Pre-filled nickname
            room: Pre-filled room
        """
        super().__init__()
        self.join_defaults = {
            "#server-address-input": server_address,
            "#nickname-input": nickname,
            "#room-input": room,
        }
        self.client: Optional[RoomClient] = None
        self._current_screen = "join"
        self._receive_task: Optional[asyncio.Task] = None
        self._participant_names: List[str] = []
        self._selected_card: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield JoinScreen(id="join-screen")
        yield RoomScreen(id="room-screen")
        yield Footer()

    def on_mount(self) -> None:
        for selector, value in self.join_defaults.items():
            if value:
                self.query_one(selector, Input).value = value
        self._show_screen("join")

    def _show_screen(self, screen_name: str) -> None:
        """Show a specific screen and hide others."""
        screens = {"join": "join-screen", "room": "room-screen"}
        for name, screen_id in screens.items():
            try:
                screen = self.query_one(f"#{screen_id}")
                screen.display = name == screen_name
            except NoMatches:
                pass
        self._current_screen = screen_name

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        button_id = event.button.id or ""

        if button_id == "join-btn":
            await self._handle_join()
        elif button_id.startswith("card-"):
            await self._handle_vote(CARD_DECK[int(button_id.split("-", 1)[1])])
        elif button_id == "start-btn":
            await self._handle_start_session()
        elif button_id == "reveal-btn":
            await self._send(self.client.reveal_votes())
        elif button_id == "end-btn":
            await self._send(self.client.end_session())
        elif button_id == "send-btn":
            await self._handle_send_chat()
        elif button_id == "haifetti-btn":
            await self._send(self.client.haifetti())
        elif button_id == "logout-btn":
            await self._handle_logout()
        elif button_id == "terminate-btn":
            await self._send(self.client.end_pointing_session())

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submit events (Enter key)."""
        input_id = event.input.id

        if input_id == "chat-input":
            await self._handle_send_chat()
        elif input_id == "story-input":
            await self._handle_start_session()
        elif input_id in ("nickname-input", "room-input", "server-address-input"):
            await self._handle_join()

    async def on_input_changed(self, event: Input.Changed) -> None:
        """Report typing in the chat box."""
        if event.input.id == "chat-input" and event.value and self.client:
            await self._send(self.client.typing_started())

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Scrum Masters remove an offline participant by selecting it."""
        if not self.client or not self.client.is_scrum_master:
            return
        index = event.list_view.index
        if index is None or index >= len(self._participant_names):
            return
        target = self._participant_names[index]
        if self.client.participants.is_online(target):
            self._add_system_message(f"{target} is still online", "warning")
            return
        await self._send(self.client.force_remove_user(target))

    async def _handle_join(self) -> None:
        """Connect to the server and join the room."""
        status = self.query_one("#join-status", Static)
        nickname = self.query_one("#nickname-input", Input).value.strip()
        room = self.query_one("#room-input", Input).value.strip()
        address = self.query_one("#server-address-input", Input).value.strip()
        role = self.query_one("#role-select", Select).value

        if not nickname or not room:
            status.update("[red]Please enter a nickname and a room[/]")
            return
        if not address:
            status.update("[red]Please enter a server address[/]")
            return

        ws_url = address if "://" in address else f"ws://{address}"
        status.update("[yellow]Connecting...[/]")

        try:
            self.client = RoomClient(ws_url)
            self._register_callbacks(self.client)
            await self.client.connect()
            await self.client.join(room, nickname, role=str(role))
        except Exception as e:
            logger.error("Join failed: %s", e)
            status.update(f"[red]Join failed: {e}[/]")
            return

        status.update("")
        self._show_screen("room")
        self._update_room_screen()
        self._start_message_receiver()

    def _register_callbacks(self, client: RoomClient) -> None:
        client.on("participantsUpdate", self._on_participants)
        client.on("updateVotes", lambda _: self.call_later(self._update_room_screen))
        client.on("typingUpdate", lambda _: self.call_later(self._update_typing))
        client.on("userJoined", lambda name: self._notify(f"{name} joined", "info"))
        client.on("userLeft", lambda name: self._notify(f"{name} left", "warning"))
        client.on("startSession", self._on_session_started)
        client.on("revealVotes", self._on_votes_revealed)
        client.on("voteSummary", self._on_vote_summary)
        client.on("sessionEnded", lambda _: self._notify("Session ended", "info"))
        client.on("sessionTerminated", self._on_session_terminated)
        client.on("teamChat", self._on_team_chat)
        client.on(
            "emojiReaction",
            lambda data: self._notify(f"{data.get('sender')} {data.get('emoji')}", "info"),
        )
        client.on("haifetti", lambda _: self._notify("🎉🎉🎉", "success"))
        client.on(
            "error",
            lambda data: self._notify(f"Server error: {data.get('message')}", "error"),
        )

    async def _send(self, request) -> None:
        """Await a client request, reporting failures in the chat pane."""
        try:
            await request
        except Exception as e:
            logger.error("Request failed: %s", e)
            self._add_system_message(f"Request failed: {e}", "error")

    async def _handle_vote(self, card: str) -> None:
        self._selected_card = card
        await self._send(self.client.vote(card))
        self._update_cards()

    async def _handle_start_session(self) -> None:
        story_input = self.query_one("#story-input", Input)
        await self._send(self.client.start_session(story_input.value.strip()))
        story_input.value = ""

    async def _handle_send_chat(self) -> None:
        chat_input = self.query_one("#chat-input", Input)
        text = chat_input.value.strip()
        if not text:
            return
        await self._send(self.client.chat(text))
        chat_input.value = ""

    async def _handle_logout(self) -> None:
        if self._receive_task:
            self._receive_task.cancel()
            self._receive_task = None
        if self.client:
            try:
                await self.client.logout()
                await self.client.disconnect()
            except Exception as e:
                logger.error("Logout failed: %s", e)
            self.client = None
        self._clear_chat()
        self._show_screen("join")

    def _start_message_receiver(self) -> None:
        """Start the background task for receiving messages."""
        if self._receive_task:
            self._receive_task.cancel()

        async def receive_loop():
            try:
                if self.client:
                    await self.client.receive_messages()
                    self._add_system_message("Connection closed", "error")
            except asyncio.CancelledError:
                pass
            except Exception as err:
                logger.error("Message receiver error: %s", err)
                self._add_system_message(f"Connection lost: {err}", "error")

        self._receive_task = asyncio.create_task(receive_loop())

    # Callbacks from the RoomClient

    def _notify(self, message: str, message_type: str) -> None:
        self.call_later(lambda: self._add_system_message(message, message_type))

    def _on_participants(self, update: ParticipantsUpdate) -> None:
        self.call_later(self._update_room_screen)

    def _on_session_started(self, title: Any) -> None:
        self._selected_card = None
        self.call_later(self._update_room_screen)
        self._notify(f"Estimating: {title or 'Untitled Story'}", "success")

    def _on_votes_revealed(self, data: Any) -> None:
        self.call_later(self._show_votes)

    def _on_vote_summary(self, summary: VoteSummary) -> None:
        self._notify(summary.describe(), "success")

    def _on_session_terminated(self, _: Any) -> None:
        self._notify("The Scrum Master ended this pointing session", "warning")
        self.call_later(self._update_room_screen)

    def _on_team_chat(self, data: Any) -> None:
        sender = str(data.get("sender", ""))
        text = str(data.get("text", ""))
        is_own = self.client is not None and sender == self.client.nickname
        self.call_later(lambda: self._add_chat_line(sender, text, is_own))

    # Rendering

    def _update_room_screen(self) -> None:
        """Refresh header, participant list and buttons from the client mirror."""
        if not self.client:
            return
        try:
            client = self.client
            participants = client.participants
            header = self.query_one("#room-header", Static)
            story = client.story or "[dim]no active story[/]"
            header.update(
                f"[bold]Room: {client.room or '-'}[/] | Story: {story} "
                f"| Online: {len(participants.connected)}/{len(participants.names)}"
            )

            participant_list = self.query_one("#participant-list", ListView)
            participant_list.clear()
            self._participant_names = list(participants.names)
            for name in participants.names:
                participant_list.append(ListItem(Label(self._describe(name))))

            terminate_btn = self.query_one("#terminate-btn", Button)
            if client.is_scrum_master:
                terminate_btn.remove_class("hidden")
            else:
                terminate_btn.add_class("hidden")
            self._update_cards()
            self._update_typing()
        except NoMatches:
            pass

    def _describe(self, name: str) -> str:
        participants = self.client.participants
        mood = participants.moods.get(name) or ""
        role = "SM" if participants.roles.get(name) == SCRUM_MASTER else "Dev"
        device = "📱" if participants.devices.get(name) == "mobile" else "💻"
        voted = "✔" if self.client.votes.get(name) not in (None, "") else " "
        label = f"[bold cyan]{name}[/] (you)" if name == self.client.nickname else name
        if not participants.is_online(name):
            label = f"[dim]{label} (offline)[/]"
        return f"{voted} {label} {mood} [dim]{role} {device}[/]"

    def _update_cards(self) -> None:
        for index, card in enumerate(CARD_DECK):
            try:
                button = self.query_one(f"#card-{index}", Button)
            except NoMatches:
                continue
            if card == self._selected_card:
                button.add_class("selected")
            else:
                button.remove_class("selected")

    def _update_typing(self) -> None:
        if not self.client:
            return
        try:
            status = self.query_one("#typing-status", Static)
        except NoMatches:
            return
        others = [name for name in self.client.typing if name != self.client.nickname]
        status.update(f"{', '.join(others)} typing..." if others else "")

    def _show_votes(self) -> None:
        votes = ", ".join(
            f"{name}: {point}"
            for name, point in self.client.votes.items()
            if point not in (None, "")
        )
        self._add_system_message(f"Votes revealed: {votes or 'no votes'}", "success")

    def _add_chat_line(self, sender: str, text: str, is_own: bool) -> None:
        try:
            container = self.query_one("#chat-container", ScrollableContainer)
            container.mount(ChatLine(sender, text, is_own))
            container.scroll_end()
        except NoMatches:
            pass

    def _add_system_message(self, message: str, message_type: str = "info") -> None:
        try:
            container = self.query_one("#chat-container", ScrollableContainer)
            container.mount(SystemMessage(message, message_type))
            container.scroll_end()
        except NoMatches:
            pass

    def _clear_chat(self) -> None:
        try:
            self.query_one("#chat-container", ScrollableContainer).remove_children()
        except NoMatches:
            pass

    def action_go_back(self) -> None:
        """Handle back action."""
        if self._current_screen == "room":
            asyncio.create_task(self._handle_logout())
