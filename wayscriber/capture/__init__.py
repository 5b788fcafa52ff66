"""Screenshot capture: shared types, portal and Hyprland capture paths, and file saving."""