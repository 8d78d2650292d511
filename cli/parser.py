"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeletePackageCommand,
    DownloadCommand,
    ListCommand,
    NewPackageCommand,
    PackageInfoCommand,
    RemoveCommand,
    SealCommand,
    StatCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "new-package":
        _expect_count(command_name, args, 0, "")
        return NewPackageCommand()
    elif command_name == "package":
        _expect_count(command_name, args, 1, "<id>")
        return PackageInfoCommand(package_id=args[0])
    elif command_name == "seal":
        _expect_count(command_name, args, 1, "<id>")
        return SealCommand(package_id=args[0])
    elif command_name == "delete-package":
        _expect_count(command_name, args, 1, "<id>")
        return DeletePackageCommand(package_id=args[0])
    elif command_name == "list":
        return _parse_list(args)
    elif command_name == "stat":
        _expect_count(command_name, args, 2, "<id> <path>")
        return StatCommand(package_id=args[0], path=args[1])
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "download":
        return _parse_download(args)
    elif command_name == "rm":
        _expect_count(command_name, args, 2, "<id> <path>")
        return RemoveCommand(package_id=args[0], path=args[1])
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _expect_count(command_name: str, args: list[str], count: int, usage: str) -> None:
    if len(args) != count:
        if count == 0:
            raise ParseError(f"{command_name} takes no arguments")
        plural = "argument" if count == 1 else "arguments"
        raise ParseError(f"{command_name} requires exactly {count} {plural}: {usage}")


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'list <id> [prefix]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("list requires 1 or 2 arguments: <id> [prefix]")

    prefix = args[1] if len(args) > 1 else ""
    return ListCommand(package_id=args[0], prefix=prefix)


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <id> <local-file> [remote-path]' command."""
    if not 2 <= len(args) <= 3:
        raise ParseError("upload requires 2 or 3 arguments: <id> <local-file> [remote-path]")

    remote_path = args[2] if len(args) > 2 else None
    return UploadCommand(package_id=args[0], local_path=args[1], remote_path=remote_path)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <id> <remote-path> [output] [--offset N] [--length N]' command."""
    positional = []
    options = {"--offset": 0, "--length": -1}

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in options:
            if i + 1 >= len(args):
                raise ParseError(f"{arg} requires a value")
            options[arg] = _parse_int(arg, args[i + 1])
            i += 2
            continue
        positional.append(arg)
        i += 1

    if not 2 <= len(positional) <= 3:
        raise ParseError(
            "download requires 2 or 3 arguments: <id> <remote-path> [output] "
            "[--offset N] [--length N]"
        )
    if options["--offset"] < 0:
        raise ParseError("--offset must be non-negative")
    if options["--length"] == 0 or options["--length"] < -1:
        raise ParseError("--length must be positive")

    output_path = positional[2] if len(positional) > 2 else None
    return DownloadCommand(
        package_id=positional[0],
        remote_path=positional[1],
        output_path=output_path,
        offset=options["--offset"],
        length=options["--length"],
    )


def _parse_int(option: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ParseError(f"{option} expects an integer, got {value!r}")
