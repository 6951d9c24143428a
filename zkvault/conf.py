"""Session key names and client defaults.

Only the session key names are ever written to session storage.
"""
SESSION_ID = 'session_id'
SESSION_KEY = 'identity'
SESSION_SALT = 'encryption_salt'

# seconds a copied secret stays on the clipboard
CLIPBOARD_CLEAR_SECONDS = 15.0
