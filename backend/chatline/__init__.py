"""chatline - real-time direct messaging backend and client."""
