#!/usr/bin/env python3
"""Interactive chat CLI for the weather assistant."""

import sys

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from app.clients.chat import ChatClient


class ChatCLI:
    """Terminal front-end for the weather assistant."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        """Initialize chat CLI."""
        self.base_url = base_url
        self.console = Console()
        self.chat = ChatClient(base_url)

    def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                "[bold blue]Weather Assistant[/bold blue]\n"
                "Ask me about weather forecasts, climate, or meteorology.\n"
                "Commands: /help, /weather, /clear, /quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]Connected to the weather playground[/green]")

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
                command = user_input.strip().lower()

                if command in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif command == "/help":
                    self._show_help()
                    continue
                elif command == "/weather":
                    self._show_weather()
                    continue
                elif command == "/clear":
                    self.chat.clear()
                    self.console.print("[yellow]Conversation cleared[/yellow]")
                    continue

                with self.console.status("[dim]Thinking...[/dim]"):
                    reply = self.chat.send(user_input)
                if reply:
                    self._display_reply(reply.content)

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            self.chat.close()

    def _test_connection(self) -> bool:
        try:
            response = self.chat.client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _display_reply(self, text: str) -> None:
        self.console.print(
            Panel(
                Markdown(text),
                title="[bold green]Weather Assistant[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

    def _show_weather(self) -> None:
        """Show the current reading from /api/data."""
        try:
            data = self.chat.client.get(f"{self.base_url}/api/data").json()
        except (httpx.HTTPError, ValueError) as e:
            self.console.print(f"[red]Could not load weather data: {e}[/red]")
            return

        self.console.print(
            Panel(
                f"[bold]Location:[/bold] {data['location']}\n"
                f"[bold]Temperature:[/bold] {data['temperature']}°C\n"
                f"[bold]Wind Speed:[/bold] {data['windSpeed']} km/h\n"
                f"[dim]Fetched at: {data['time']}[/dim]",
                title="[yellow]Current Weather[/yellow]",
                border_style="yellow",
            )
        )

    def _show_help(self) -> None:
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /weather - Show the current reading for the configured location
• /clear - Forget the conversation and start over
• /quit or /exit - Exit the chat

[bold]Example Questions:[/bold]
1. "Will it rain in New York tomorrow?"
2. "What causes a heat dome?"
3. "How should I prepare for a hurricane?"
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

    chat = ChatCLI(base_url)
    chat.start()


if __name__ == "__main__":
    main()
