"""Status update template: generic notice for other fulfillment changes."""


class OrderStatusUpdateTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        previous = context.get("previous_status_display", "")
        current = context.get("status_display", "")
        return {
            "subject": f"Order Update - {order_number}",
            "body": (
                f"The status of your order {order_number} has changed "
                f"from {previous} to {current}.\n\n"
                "Thank you for shopping with us."
            ),
        }
