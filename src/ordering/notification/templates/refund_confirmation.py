"""Refund confirmation template: sent after a refund is recorded."""


class RefundConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        amount = context.get("amount", "0.00")
        refund_id = context.get("refund_id", "N/A")
        reason = context.get("reason", "as requested")
        return {
            "subject": f"Refund Confirmation - {order_number}",
            "body": (
                f"A refund of {amount} has been processed for order {order_number}.\n\n"
                f"Refund ID: {refund_id}\n"
                f"Reason: {reason}\n\n"
                "The refund will appear in your original payment method within "
                "5-10 business days."
            ),
        }
