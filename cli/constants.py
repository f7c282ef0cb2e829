"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "list", "refresh", "upload", "toggle", "public", "private", "delete", "share", "copy",
    "view", "fetch", "cancel", "token", "logout", "notifications", "clear", "exit", "help",
]

ID_COMMANDS = ("toggle", "public", "private", "delete", "share", "copy", "view", "fetch", "cancel")

STYLE = Style.from_dict(
    {
        "prompt": "#16a34a bold",
        "prompt.signed-out": "#9ca3af",
        "command": "#0088ff bold",
        "success": "#16a34a",
        "error": "#dc2626 bold",
        "busy": "#d97706",
    }
)

GREEN = "\033[38;2;22;163;74m"
RED = "\033[38;2;220;38;38m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ███████╗██╗  ██╗ █████╗ ██████╗ ███████╗██████╗  ██████╗ ██╗  ██╗
 ██╔════╝██║  ██║██╔══██╗██╔══██╗██╔════╝██╔══██╗██╔═══██╗╚██╗██╔╝
 ███████╗███████║███████║██████╔╝█████╗  ██████╔╝██║   ██║ ╚███╔╝
 ╚════██║██╔══██║██╔══██║██╔══██╗██╔══╝  ██╔══██╗██║   ██║ ██╔██╗
 ███████║██║  ██║██║  ██║██║  ██║███████╗██████╔╝╚██████╔╝██╔╝ ██╗
 ╚══════╝╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝╚═════╝  ╚═════╝ ╚═╝  ╚═╝
{RESET}"""

WELCOME_TITLE = "Sharebox - Secure file sharing made simple"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "sharebox> "
SIGNED_OUT_PROMPT_TEXT = "sharebox (signed out)> "

NOT_LOGGED_IN = "Not logged in. Run: token <bearer-token>"

HELP_TEXT = """Available commands:
  list                       Show your files
  refresh                    Reload your files from the server
  upload <path>              Upload a local file
  toggle <file-id>           Switch a file between private and public
  public <file-id>           Make a file public (creates a share link)
  private <file-id>          Make a file private (revokes its share link)
  delete <file-id>           Delete a file permanently (asks for confirmation)
  share <file-id>            Show the share link of a public file
  copy <file-id>             Copy the share link of a public file to the clipboard
  view <file-id>             Open a file in the browser
  fetch <file-id> [dest]     Download a public file through its share link
  cancel <file-id>|upload    Cancel an action still in progress
  token <bearer-token>       Sign in with a token issued by the service
  logout                     Forget the stored token
  notifications              Show recent notifications
  clear                      Clear screen and redisplay welcome message
  help                       Show this help
  exit                       Exit REPL

File ids can be shortened to any unique prefix.
Actions run in the background; their result is printed when they finish.
Examples:
  token eyJhbGciOiJIUzI1NiJ9...
  upload ~/Documents/report.pdf
  public 64f1a2
  copy 64f1a2
  delete 64f1a2"""
