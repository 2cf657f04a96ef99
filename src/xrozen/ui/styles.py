"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - sidebar | chat
   ============================================ */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 34 1fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* ============================================
   Conversation Sidebar
   ============================================ */
#conversation-list {
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;

    &:focus {
        border: round $primary;
    }

    & > .option-list--option {
        padding: 0 1;
    }

    &.-disabled {
        opacity: 60%;
    }
}

/* ============================================
   Chat Column
   ============================================ */
#chat-column {
    height: 100%;
    background: transparent;
    padding: 0;
}

#chat-history {
    height: 1fr;
    background: $panel;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $secondary;
    }
}

.empty-state {
    width: 100%;
    height: auto;
    content-align: center middle;
    text-align: center;
    color: $text-muted;
    padding: 2 4;
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 2;
    background: transparent;
}

.user-message {
    border-left: tall $primary;
    background: $primary 10%;

    & .message-header {
        color: $primary;
        text-style: bold;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

/* Optimistic message waiting for confirmation */
.pending-message {
    opacity: 70%;
    border-left: dashed $primary;
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    margin: 0;
    padding: 0;
}

#thinking {
    height: 1;
    padding: 0 2;
    color: $text-muted;
    text-style: italic;
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    scrollbar-gutter: stable;
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status-line {
    height: 1;
    padding: 0 2;
    color: $text-muted;
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $primary;
    background: $primary;
    color: $background;
    text-style: bold;

    &:disabled {
        opacity: 50%;
    }
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $success;
    }

    &.-warning {
        border: tall $warning;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
    }
}

Header {
    background: $panel;
    color: $foreground;
    height: 1;
}

Footer {
    background: $panel;
}
"""
