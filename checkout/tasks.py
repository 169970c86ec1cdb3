import logging

from celery import shared_task
from django.db import DatabaseError

from checkout.errors import DuplicateTransactionError
from checkout.store import TransactionRecord, get_store

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(DatabaseError,),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_jitter=True,
    max_retries=5,
)
def persist_transaction(self, transaction_id: str, document: dict) -> bool:
    """
    Regrava o registro de uma cobrança que a PushinPay já criou mas que não
    entrou no banco. A chave é o id da operadora, então repetir é seguro.
    """
    record = TransactionRecord.from_document(document)
    try:
        get_store().put(transaction_id, record)
    except DuplicateTransactionError:
        logger.info("[checkout] Transação %s já registrada; nada a fazer.", transaction_id)
        return False
    logger.warning(
        "[checkout] Transação %s registrada na tentativa %d.",
        transaction_id,
        self.request.retries + 1,
    )
    return True
