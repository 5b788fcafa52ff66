# wayscriber

Building blocks for a screen annotation tool on Wayland compositors:
screenshot capture through the desktop portal or the Hyprland/wlroots tools,
saving captures to disk, keyboard-shortcut parsing, configuration value
types, and moving settings out of the older `hyprmarker` directory.

## Requirements

Python 3.11 or later on Linux. Capturing relies on what the desktop provides:

- `hyprctl`, `grim` and `slurp` for the Hyprland/wlroots capture paths,
- an `xdg-desktop-portal` implementation reachable on the D-Bus session bus
  (`DBUS_SESSION_BUS_ADDRESS` must be set) for portal captures.

The only third-party dependency is `platformdirs`.

## Capture

### Capture types and results

`wayscriber.capture.types` holds the shared data types:

- `CaptureType.full_screen()`, `CaptureType.active_window()` and
  `CaptureType.selection(x, y, width, height)` (a negative width or height
  raises `ValueError`); the kind is a `CaptureKind`.
- `CaptureDestination`: `CLIPBOARD_ONLY`, `FILE_ONLY`, `CLIPBOARD_AND_FILE`.
- `CaptureResult` (image bytes, saved path, clipboard flag) and
  `CaptureOutcome.success(result)` / `CaptureOutcome.failed(message)`.
- `CaptureStatus` with a `CaptureState` phase; only `CaptureStatus.failed(message)`
  carries a message.
- `CaptureError` and its subclasses `PortalUnavailableError`,
  `PermissionDeniedError`, `DBusError`, `SaveError`, `ClipboardError`,
  `ImageError` and `InvalidResponseError`.

### Through the desktop portal

```python
import asyncio
from wayscriber.capture.portal import capture_via_portal, is_portal_available
from wayscriber.capture.types import CaptureType

if asyncio.run(is_portal_available()):
    uri = asyncio.run(capture_via_portal(CaptureType.full_screen()))
    print(uri)   # file:// URI of the screenshot the portal wrote
```

`capture_via_portal` talks to `org.freedesktop.portal.Screenshot` over the
session bus and waits for the request's `Response` signal. A cancelled
request raises `PermissionDeniedError`; other portal error codes and
malformed replies raise `InvalidResponseError`; bus problems raise
`DBusError`. `build_portal_options(capture_type)` gives the options sent:
full-screen captures are non-interactive, the others interactive.

### Through Hyprland tools

`wayscriber.capture.hyprland` provides two coroutines that return PNG bytes:

- `capture_active_window_hyprland()` asks `hyprctl activewindow -j` for the
  focused window's position and size and captures it with `grim`;
- `capture_selection_hyprland()` lets the user pick a region with `slurp`
  and captures it with `grim`.

Failures of the tools raise `ImageError`; unusable `hyprctl` output raises
`InvalidResponseError`. `parse_active_window_geometry(data)` turns the
`hyprctl` JSON into the `"x,y WxH"` geometry passed to `grim`.

### Saving to disk

```python
from wayscriber.capture.file import FileSaveConfig, save_screenshot

path = save_screenshot(png_bytes, FileSaveConfig())
```

`FileSaveConfig` defaults to the user's pictures directory plus `Wayscriber`,
the template `screenshot_%Y-%m-%d_%H%M%S` and the format `png`. The directory
is created when missing, the file name comes from `generate_filename(template,
format)` using local time, and on POSIX the file gets permissions `0600`.
Errors raise `SaveError`. `ensure_directory_exists(directory)` and
`expand_tilde(path)` (expands a leading `~/`) are available on their own.

## Configuration

### Keybindings

Shortcuts are modifiers and a key joined by `+`, in any order and with
optional spaces: `"Ctrl+Shift+W"`, `"Shift + Ctrl + W"`, `"F10"`,
`"Ctrl+Shift++"`.

```python
from wayscriber.config.keybindings import KeyBinding, KeybindingsConfig

binding = KeyBinding.parse("Ctrl+Shift+W")
binding.matches("w", True, True, False)   # True: the key is case-insensitive

actions = KeybindingsConfig().build_action_map()   # KeyBinding -> Action
```

`KeyBinding.parse` raises `ValueError` for an empty string or one holding
only modifiers; `build_action_map()` raises `ValueError` when a shortcut
cannot be parsed or is bound to two actions. `KeybindingsConfig.from_dict`
reads a `[keybindings]` table (missing actions keep their defaults) and
`to_dict` returns one.

### Value types

`wayscriber.config.enums` has `StatusPosition` (`top-left`, `top-right`,
`bottom-left`, `bottom-right`) and `ColorSpec`, which is either a colour name
or an RGB triple of 0–255 integers: `ColorSpec.from_value("red")`,
`ColorSpec.from_value([255, 128, 0])`, and `to_value()` for the reverse.

### Directories

`wayscriber.config.paths` gives `config_home_dir()` (an absolute
`$XDG_CONFIG_HOME`, otherwise the platform's config directory),
`primary_config_dir()` (`.../wayscriber`) and `legacy_config_dir()`
(`.../hyprmarker`).

### Moving settings from hyprmarker

```python
from wayscriber.config.migration import migrate_config

report = migrate_config(True)
print(report.actions)   # NoLegacyConfig, DryRun or Migrated
```

`migrate_config(dry_run)` copies every file from the legacy directory into
the primary one. An existing primary directory is first moved aside to a
timestamped `wayscriber.backup.*` directory, whose path is reported in
`Migrated.backup_path`. With `dry_run=True` nothing is touched and `DryRun`
reports how many files would be copied.

## What this package does not do

- It does not copy images to the clipboard.
- It does not read, validate, clamp or write `config.toml`; there are no
  drawing, arrow, UI, board or capture settings objects, only the keybinding
  and value types above.
- It has no background capture queue and does not chain the capture paths
  together: choosing between the Hyprland tools and the portal, reading the
  portal's file and delivering the image are left to the caller.
- It has no command-line program and no overlay or drawing surface.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.