"""Configuration: keybindings, value types, directory locations and legacy migration."""