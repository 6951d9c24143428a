"""zkvault Meta information.
   zkvault keeps password vault records encrypted with a key that only
   the client can derive from the master password.
"""
__title__ = 'zkvault'
__description__ = (
   'Client-side zero-knowledge encryption for password vault records.'
)
__version__ = '0.1.0'
__license__ = 'Apache-2.0'
