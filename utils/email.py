# utils/email.py
import requests

import config

BREVO_URL = "https://api.brevo.com/v3/smtp/email"


def send_notification_email(to_email: str, subject: str, message: str):
     if not config.BREVO_API_KEY:
          raise Exception("BREVO_API_KEY is not set")

     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": config.BREVO_API_KEY,
               "Content-Type": "application/json",
          },
          json={
               "sender": {"name": "Emperium City", "email": config.MAIL_SENDER},
               "to": [{"email": to_email}],
               "subject": subject,
               "htmlContent": f"""
                    <h2 style="color:#1e3a5f">{subject}</h2>
                    <p>{message}</p>
                    <p style="color:#6b7280">Emperium City Grievance Redressal System</p>
               """,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise Exception(f"Brevo error: {response.text}")
