from decimal import Decimal
from html import escape

from stock_alert_monitor.db import AlertType
from stock_alert_monitor.market_calendar import to_exchange_time
from stock_alert_monitor.schemas import AlertNotification


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _wording(alert_type: AlertType) -> tuple[str, str]:
    if alert_type == AlertType.ABOVE:
        return "risen above", "consider taking profits"
    return "dropped below", "review your position"


def prepare_subject(notification: AlertNotification) -> str:
    direction, _ = _wording(notification.alert_type)
    return f"Stock Alert: {notification.symbol} has {direction} {_money(notification.target_price)}"


def prepare_text_body(notification: AlertNotification) -> str:
    direction, action = _wording(notification.alert_type)
    triggered = to_exchange_time(notification.triggered_at).strftime("%m/%d/%Y, %I:%M:%S %p")
    name = notification.stock_name or notification.symbol
    return (
        f"Stock Price Alert Triggered\n\n"
        f"{notification.symbol} - {name}\n"
        f"Alert Type: {notification.alert_type.value.upper()}\n"
        f"Target Price: {_money(notification.target_price)}\n"
        f"Current Price: {_money(notification.current_price)}\n"
        f"Triggered At: {triggered} ET\n\n"
        f"Recommendation: The stock has {direction} your target price. "
        f"You may want to {action}.\n\n"
        f"This is an automated alert from Stock Tracker. Please do not reply to this email.\n"
    )


def prepare_email_body(notification: AlertNotification) -> str:
    direction, action = _wording(notification.alert_type)
    triggered = to_exchange_time(notification.triggered_at).strftime("%m/%d/%Y, %I:%M:%S %p")
    name = escape(notification.stock_name or notification.symbol)
    color = "#22c55e" if notification.alert_type == AlertType.ABOVE else "#ef4444"
    return f"""<html>
  <body>
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #1a1a2e;">Stock Price Alert Triggered</h2>
      <div style="background: #f5f5f5; padding: 20px; border-radius: 8px;">
        <h3 style="margin: 0 0 10px;">{escape(notification.symbol)} - {name}</h3>
        <table style="width: 100%; border-collapse: collapse;">
          <tr>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd;"><strong>Alert Type:</strong></td>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd;">{notification.alert_type.value.upper()}</td>
          </tr>
          <tr>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd;"><strong>Target Price:</strong></td>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd;">{_money(notification.target_price)}</td>
          </tr>
          <tr>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd;"><strong>Current Price:</strong></td>
            <td style="padding: 8px 0; border-bottom: 1px solid #ddd; color: {color};">
              <strong>{_money(notification.current_price)}</strong>
            </td>
          </tr>
          <tr>
            <td style="padding: 8px 0;"><strong>Triggered At:</strong></td>
            <td style="padding: 8px 0;">{triggered} ET</td>
          </tr>
        </table>
      </div>
      <div style="margin-top: 20px; padding: 15px; background: #fff3cd; border-radius: 8px;">
        <p style="margin: 0; color: #856404;">
          <strong>Recommendation:</strong> The stock has {direction} your target price. You may want to {action}.
        </p>
      </div>
      <p style="color: #666; font-size: 12px; margin-top: 20px;">
        This is an automated alert from Stock Tracker. Please do not reply to this email.
      </p>
    </div>
  </body>
</html>
"""
