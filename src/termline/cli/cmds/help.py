_HELP = """Build command lines for long-lived bash, PowerShell and cmd.exe shells.

**Quick start:**

* `termline prepare --shell /bin/bash --cwd /tmp -- node -e "console.log(1)"`
* `termline prepare --shell pwsh --env PATH=/usr/bin --env DEBUG -- make`
* `termline quote "it's" --dialect bash --mode strong`
* `termline detect /usr/bin/pwsh`
"""
