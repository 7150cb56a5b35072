"""
Taxonomie des erreurs métier de la boutique.

Chaque erreur porte le code HTTP vers lequel elle est traduite par
app_setup/exceptions.py. NotificationError n'est jamais renvoyée au client:
le dispatcher d'emails la journalise seulement.
"""


class ShopError(Exception):
    status_code = 500
    default_message = "Erreur interne"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(ShopError):
    status_code = 400
    default_message = "Requête invalide"


class InvalidQuantity(InvalidRequest):
    default_message = "Quantité invalide"


class MissingFields(InvalidRequest):
    """Champs obligatoires absents; rendu au format {success, message} des routes hero."""

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class SignatureInvalid(ShopError):
    status_code = 400
    default_message = "Signature webhook invalide"


class Unauthorized(ShopError):
    status_code = 401
    default_message = "Non authentifié"


class NotFound(ShopError):
    status_code = 404
    default_message = "Introuvable"


class ProductUnavailable(NotFound):
    default_message = "Produit indisponible"


class PaymentProviderError(ShopError):
    default_message = "Payment session creation failed"


class PersistenceError(ShopError):
    default_message = "Erreur base de données"


class NotificationError(ShopError):
    default_message = "Envoi d'email impossible"
