"""
Console
Command line entry point: mvcsanic <command> [args] [--option=value]
"""
import asyncio
import sys
import traceback
from typing import Dict, List, Optional

from mvcsanic.console.command import Command
from mvcsanic.console.commands import RouteListCommand, RouteMatchCommand, RouteUrlCommand
from mvcsanic.routing import RouteLoader

# Global option naming a route file to load before running the command
ROUTES_FILE_OPTION = 'routes-file'


class Console:
    """Registers commands and runs one of them"""

    COMMANDS = [
        RouteListCommand,
        RouteMatchCommand,
        RouteUrlCommand,
    ]

    def __init__(self, app=None, output=None):
        """
        Args:
            app: Application, created from the working directory when omitted
            output: Stream for command output (stdout by default)
        """
        self.app = app
        self.output = output or sys.stdout
        self.commands: Dict[str, Command] = {}
        for command_class in self.COMMANDS:
            self.add(command_class(self.output))

    def add(self, command: Command):
        """Register a command instance"""
        self.commands[command.name] = command

    def _print(self, message: str = ""):
        print(message, file=self.output)

    def show_help(self):
        """Show available commands"""
        self._print("mvcsanic - routing console")
        self._print()

        categories: Dict[str, List[Command]] = {}
        for name, command in self.commands.items():
            category = name.split(':')[0] if ':' in name else 'general'
            categories.setdefault(category, []).append(command)

        for category in sorted(categories):
            self._print(f"{category.upper()}:")
            for command in sorted(categories[category], key=lambda c: c.name):
                self._print(f"  {command.signature:<40} {command.description}")
            self._print()

        self._print(f"Options: --{ROUTES_FILE_OPTION}=<path> loads a route file first")

    def _get_app(self, routes_file: Optional[str] = None):
        if self.app is None:
            from mvcsanic.application import Application
            self.app = Application()
        self.app.boot()
        if routes_file:
            RouteLoader(self.app.create_router()).load_route_file(routes_file)
        return self.app

    async def run(self, argv: List[str]) -> int:
        """Run the CLI application"""
        if len(argv) < 2:
            self.show_help()
            return 0

        command_name = argv[1]

        if command_name in ['help', '--help', '-h']:
            if len(argv) > 2 and argv[2] in self.commands:
                command = self.commands[argv[2]]
                self._print(f"Command: {command.name}")
                self._print(f"Description: {command.description}")
                self._print(f"Signature: {command.signature}")
                return 0
            self.show_help()
            return 0

        if command_name not in self.commands:
            self._print(f"❌ Unknown command: {command_name}")
            self._print()
            self.show_help()
            return 1

        command = self.commands[command_name]
        args, kwargs = self._parse_args(argv[2:])
        routes_file = kwargs.pop(ROUTES_FILE_OPTION, None)

        try:
            command.app = self._get_app(routes_file)
            exit_code = await command.handle(*args, **kwargs)
        except KeyboardInterrupt:
            self._print("⚠ Command interrupted by user")
            return 130
        except Exception as e:
            self._print(f"❌ Error executing command: {e}")
            traceback.print_exc()
            return 1

        return exit_code if exit_code is not None else 0

    def _parse_args(self, argv):
        """
        Parse command line arguments
        Returns tuple of (positional_args, keyword_args)
        """
        args = []
        kwargs = {}

        for arg in argv:
            if arg.startswith('--'):
                # Long option (--absolute, --id=5)
                if '=' in arg:
                    key, value = arg[2:].split('=', 1)
                    # Try to convert to int
                    try:
                        kwargs[key] = int(value)
                    except ValueError:
                        # Try to convert to bool
                        if value.lower() in ('true', 'false'):
                            kwargs[key] = value.lower() == 'true'
                        else:
                            kwargs[key] = value
                else:
                    # Boolean flag
                    kwargs[arg[2:]] = True
            elif arg.startswith('-') and len(arg) > 1:
                # Short option
                kwargs[arg[1:]] = True
            else:
                # Positional argument
                args.append(arg)

        return args, kwargs


def main():
    """Console script entry point"""
    sys.exit(asyncio.run(Console().run(sys.argv)))


if __name__ == '__main__':
    main()
