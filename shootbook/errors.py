class ShootbookError(Exception):
    """Erreur de base de l'application."""


class StorageError(ShootbookError):
    """Écriture impossible dans le stockage clé/valeur (l'état précédent est conservé)."""


class NotificationPermissionError(ShootbookError):
    """L'utilisateur a refusé les notifications."""


class ExportError(ShootbookError):
    """Aucun moteur PDF disponible ou rendu en échec."""
