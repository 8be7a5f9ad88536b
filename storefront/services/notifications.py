"""Order confirmation emails."""

import smtplib

from flask_mail import Message

from storefront.extensions import mail
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderNotifier:
    """Sends a plain-text confirmation once an order is committed.

    Delivery is best effort: the order already exists, so a mail failure is
    logged and never reported to the customer as a failed checkout.
    """

    def __init__(self, enabled=False, bcc=None):
        self.enabled = enabled
        self.bcc = bcc

    def order_placed(self, placed, checkout):
        if not self.enabled:
            return False

        msg = Message(
            subject=f'Order {placed.order_number} received',
            recipients=[checkout.email],
            bcc=[self.bcc] if self.bcc else None,
            body=self._render(placed, checkout),
        )
        try:
            mail.send(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning('order.notification_failed',
                           order_number=placed.order_number, error=str(exc))
            return False

        logger.info('order.notification_sent', order_number=placed.order_number)
        return True

    @staticmethod
    def _render(placed, checkout):
        lines = [
            f'Hello, {checkout.name}!',
            '',
            f'Your order {placed.order_number} has been placed.',
            '',
        ]
        for item in placed.items:
            lines.append(f'{item.name} x {item.quantity} = {item.subtotal}')
        lines += [
            '',
            f'Total: {placed.total}',
            f'Delivery address: {checkout.address}',
        ]
        if checkout.company_name:
            lines.append(f'Company: {checkout.company_name} (BIN {checkout.bin})')
        if checkout.comment:
            lines.append(f'Comment: {checkout.comment}')
        return '\n'.join(lines)
