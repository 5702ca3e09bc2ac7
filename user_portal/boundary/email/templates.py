"""
Email bodies.

Each builder returns ``(subject, html, text)``.

Dependencies: html (stdlib)
System role: Email content rendering
"""

from html import escape

_HTML_SHELL = """<!DOCTYPE html>
<html lang="es">
<head><meta charset="UTF-8"><title>{title}</title></head>
<body style="font-family: 'Segoe UI', Tahoma, sans-serif; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: #004a8d; color: #fff; padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">
    <h2 style="margin: 0;">Universidad de Sancti Spíritus</h2>
  </div>
  <div style="background: #fff; padding: 30px; border-radius: 0 0 8px 8px;">
    {body}
  </div>
  <p style="font-size: 12px; color: #888; text-align: center;">Este es un mensaje automático, por favor no responda.</p>
</body>
</html>"""


def verification_code(user_name: str, code: str, minutes: int = 10) -> tuple[str, str, str]:
    subject = "Código de verificación - UNISS"
    body = (
        f"<h1 style=\"color: #004a8d;\">Hola {escape(user_name)}</h1>"
        "<p>Use el siguiente código para continuar:</p>"
        f"<div style=\"font-size: 36px; letter-spacing: 8px; text-align: center; "
        f"border: 2px dashed #004a8d; padding: 16px; font-weight: bold;\">{escape(code)}</div>"
        f"<p>El código expira en {minutes} minutos. Si no solicitó este código, ignore este mensaje.</p>"
    )
    text = (
        f"Hola {user_name}\n\nSu código de verificación es: {code}\n"
        f"Expira en {minutes} minutos."
    )
    return subject, _HTML_SHELL.format(title=subject, body=body), text


def welcome(user_name: str, username: str, user_type: str) -> tuple[str, str, str]:
    subject = "Bienvenido al Portal de Usuarios - UNISS"
    body = (
        f"<h1 style=\"color: #004a8d;\">Bienvenido, {escape(user_name)}</h1>"
        f"<p>Su cuenta de {escape(user_type.lower())} ha sido creada.</p>"
        f"<p>Usuario: <strong>{escape(username)}</strong></p>"
        "<p>Le recomendamos configurar un PIN y la verificación en dos pasos desde el portal.</p>"
    )
    text = f"Bienvenido, {user_name}\n\nSu cuenta ha sido creada. Usuario: {username}"
    return subject, _HTML_SHELL.format(title=subject, body=body), text


def password_expiry_alert(user_name: str, days_left: int) -> tuple[str, str, str]:
    if days_left <= 0:
        subject = "Su contraseña ha expirado - UNISS"
        notice = "Su contraseña ha expirado. Cámbiela desde el portal para recuperar el acceso."
    else:
        subject = f"Su contraseña expira en {days_left} día(s) - UNISS"
        notice = f"Su contraseña expirará en <strong>{days_left}</strong> día(s). Cámbiela desde el portal."
    body = f"<h1 style=\"color: #004a8d;\">Hola {escape(user_name)}</h1><p>{notice}</p>"
    text = f"Hola {user_name}\n\n" + notice.replace("<strong>", "").replace("</strong>", "")
    return subject, _HTML_SHELL.format(title=subject, body=body), text
