"""
chatscreen.core — the screen/navigation/state engine.

Modules:
    screen      Screen entity and handler registration
    controls    UIControl variants and their renderers
    render      Screen composition into one outbound Message
    routing     Callback-token matchers (navigation > back > handler)
    manager     ScreenManager: registry, navigation, event routing
    state       Per-chat StateMachine
    config      Configuration loading (TOML + env vars)
    exceptions  chatscreen exception hierarchy
    constants   Reserved tokens, defaults, exit codes
"""
