"""Shipped template: sent when the order is handed to a carrier."""


class OrderShippedTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        carrier = context.get("carrier") or "the carrier"
        tracking_number = context.get("tracking_number") or "N/A"
        tracking_url = context.get("tracking_url")
        tracking_line = f"Track your parcel: {tracking_url}\n" if tracking_url and tracking_url != "#" else ""
        return {
            "subject": f"Your Order Has Shipped - {order_number}",
            "body": (
                f"Great news! Your order {order_number} has shipped.\n\n"
                f"Carrier: {carrier}\n"
                f"Tracking Number: {tracking_number}\n"
                f"{tracking_line}\n"
                "You'll receive another notification when it's delivered."
            ),
        }
