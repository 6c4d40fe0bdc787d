"""Delivered template: sent when the parcel reaches the customer."""


class OrderDeliveredTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        tracking_number = context.get("tracking_number")
        tracking_line = f"Tracking Number: {tracking_number}\n" if tracking_number else ""
        return {
            "subject": f"Order Delivered - {order_number}",
            "body": (
                f"Your order {order_number} has been successfully delivered.\n\n"
                f"{tracking_line}\n"
                "If you have any questions, our support team is here to help."
            ),
        }
