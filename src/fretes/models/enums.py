"""Enumerations for the Fretes admin client."""

from enum import Enum

from ..config import STATUS_LABELS


class PackageStatus(str, Enum):
    """Delivery status of a package.

    The usual lifecycle is criado -> esperando_coleta -> coletado ->
    enviado -> entregue, with extraviado as an alternate terminal state.
    The backend accepts any status as the next one; the client does not
    enforce the ordering.
    """

    CRIADO = "criado"
    ESPERANDO_COLETA = "esperando_coleta"
    COLETADO = "coletado"
    ENVIADO = "enviado"
    ENTREGUE = "entregue"
    EXTRAVIADO = "extraviado"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self.value]

    @property
    def is_terminal(self) -> bool:
        return self in (PackageStatus.ENTREGUE, PackageStatus.EXTRAVIADO)


def status_label(status: str | None) -> str:
    """Display label for a raw status string; unknown values pass through."""
    if not status:
        return "?"
    return STATUS_LABELS.get(status, status)
