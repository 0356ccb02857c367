"""mb-vault: encrypted credential vault with clipboard access from the terminal."""
