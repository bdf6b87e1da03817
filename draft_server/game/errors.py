# draft errors.
# Every failure the engine or the reveal flow can raise. None of them are
# fatal: the session is left exactly as it was before the call and the server
# turns each one into a JSON error body with `status_code`.


class DraftError(Exception):
    kind = "DraftError"
    status_code = 400
    default_message = "Draft action failed"

    def __init__(self, message: str = None, **context):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.context = context

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind, **self.context}


class WrongPhaseError(DraftError):
    kind = "WrongPhase"
    status_code = 409
    default_message = "Action not allowed in the current phase"


class AlreadyResolvedError(DraftError):
    kind = "AlreadyResolved"
    status_code = 409
    default_message = "Card is already banned or picked"


class DeckFullError(DraftError):
    kind = "DeckFull"
    status_code = 409
    default_message = "Deck already has 5 cards"


class DeckIncompleteError(DraftError):
    kind = "DeckIncomplete"
    status_code = 409
    default_message = "Pick 5 cards before starting the battle"


class UnknownCardError(DraftError):
    kind = "UnknownCard"
    status_code = 404
    default_message = "Card not found"


class UnauthenticatedError(DraftError):
    kind = "Unauthenticated"
    status_code = 401
    default_message = "Please connect wallet first"


class SignatureDeclinedError(DraftError):
    kind = "SignatureDeclined"
    status_code = 403
    default_message = "Signature request was declined"


class DecodeError(DraftError):
    kind = "DecodeError"
    status_code = 422
    default_message = "Malformed encrypted value"
