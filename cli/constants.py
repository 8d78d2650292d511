"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "new-package", "package", "seal", "delete-package", "list", "stat",
    "upload", "download", "rm", "clear", "exit", "help",
]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6A bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;158;106m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ███████╗██╗██╗     ███████╗██╗  ██╗███████╗ █████╗ ██████╗
 ██╔════╝██║██║     ██╔════╝██║  ██║██╔════╝██╔══██╗██╔══██╗
 █████╗  ██║██║     █████╗  ███████║█████╗  ███████║██████╔╝
 ██╔══╝  ██║██║     ██╔══╝  ██╔══██║██╔══╝  ██╔══██║██╔═══╝
 ██║     ██║███████╗███████╗██║  ██║███████╗██║  ██║██║
 ╚═╝     ╚═╝╚══════╝╚══════╝╚═╝  ╚═╝╚══════╝╚═╝  ╚═╝╚═╝
{RESET}"""

WELCOME_TITLE = "FileHeap CLI - Content-addressed file storage"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "fileheap> "

HELP_TEXT = """Available commands:
  new-package                                   Create a new, empty package
  package <id>                                  Show package metadata
  seal <id>                                     Make a package read-only (not reversible)
  delete-package <id>                           Delete a package and all of its files
  list <id> [prefix]                            List files in a package
  stat <id> <path>                              Show file size, digest and modification time
  upload <id> <local-file> [remote-path]        Upload a local file (remote path defaults to its name)
  download <id> <remote-path> [output]          Download a file (output defaults to its base name)
           [--offset N] [--length N]            ...or only a byte range of it
  rm <id> <path>                                Delete a file
  clear                                         Clear screen and redisplay welcome message
  help                                          Show this help
  exit                                          Exit REPL

Examples:
  new-package
  upload 6f1c0e2a9b3d4c5e6f708192 data/report.csv reports/2024.csv
  list 6f1c0e2a9b3d4c5e6f708192 reports/
  download 6f1c0e2a9b3d4c5e6f708192 reports/2024.csv --offset 100 --length 50
  seal 6f1c0e2a9b3d4c5e6f708192"""
