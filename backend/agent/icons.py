"""Icon table shared by the system prompt and the chat client.

The model may reference any of these keys in its "icons" field. Unknown keys
are dropped when rendering, never treated as an error.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class IconDefinition:
    glyph: str
    keywords: tuple[str, ...]
    description: str


ICON_BANK: dict[str, IconDefinition] = {
    # Connectivity
    "wifi": IconDefinition("📶", ("wifi", "internet", "conexión", "red", "señal"),
                           "Ícono de WiFi - las rayitas curvas"),
    "wifiOff": IconDefinition("🚫📶", ("wifi apagado", "sin internet", "sin conexión"),
                              "WiFi apagado - rayitas con una línea cruzada"),
    "bluetooth": IconDefinition("🔵", ("bluetooth", "auriculares", "conectar"),
                                "Ícono de Bluetooth - como una B rara"),
    "bluetoothOff": IconDefinition("⚪", ("bluetooth apagado",), "Bluetooth apagado"),

    # Settings & system
    "settings": IconDefinition("⚙️", ("configuración", "ajustes", "ruedita", "engranaje", "opciones"),
                               "Ruedita de configuración - el engranaje"),
    "power": IconDefinition("⏻", ("encender", "apagar", "prender", "botón", "power"),
                            "Botón de encendido - el circulito con la rayita"),
    "restart": IconDefinition("🔄", ("reiniciar", "resetear", "volver a empezar"),
                              "Flechita circular para reiniciar"),
    "home": IconDefinition("🏠", ("inicio", "casa", "principal", "home"), "Casita - botón de inicio"),
    "menu": IconDefinition("☰", ("menú", "tres rayitas", "opciones", "hamburguesa"),
                           "Tres rayitas horizontales - el menú"),

    # Sound & notifications
    "volume": IconDefinition("🔊", ("volumen", "sonido", "alto", "parlante"), "Parlante con sonido"),
    "mute": IconDefinition("🔇", ("silencio", "mudo", "sin sonido", "volumen apagado"),
                           "Parlante tachado - silencio"),
    "bell": IconDefinition("🔔", ("notificación", "campanita", "alerta", "sonido"),
                           "Campanita de notificaciones"),
    "bellOff": IconDefinition("🔕", ("silencio", "no molestar", "campanita tachada"),
                              "Campanita tachada - no molestar"),
    "mic": IconDefinition("🎤", ("micrófono", "hablar", "voz", "grabar"), "Micrófono"),
    "micOff": IconDefinition("🎙️🚫", ("micrófono apagado", "silenciado"), "Micrófono tachado"),

    # Communication
    "phone": IconDefinition("📞", ("teléfono", "llamar", "llamada"), "Teléfono para llamar"),
    "hangup": IconDefinition("☎️", ("colgar", "terminar llamada"), "Teléfono rojo para colgar"),
    "message": IconDefinition("💬", ("mensaje", "chat", "whatsapp", "sms", "texto"), "Globito de mensaje"),
    "mail": IconDefinition("✉️", ("correo", "email", "mail", "sobre"), "Sobre de correo electrónico"),

    # Battery
    "battery": IconDefinition("🔋", ("batería", "pila", "carga"), "Batería"),
    "batteryLow": IconDefinition("🪫", ("batería baja", "poca pila"), "Batería baja - poca carga"),
    "batteryCharging": IconDefinition("🔌", ("cargando", "enchufado", "cargador"),
                                      "Batería cargando - con el rayito"),

    # Media
    "camera": IconDefinition("📷", ("cámara", "foto", "sacar foto"), "Cámara de fotos"),
    "image": IconDefinition("🖼️", ("foto", "imagen", "galería", "álbum"), "Ícono de imagen/foto"),
    "video": IconDefinition("🎥", ("video", "grabar", "filmadora"), "Cámara de video"),
    "music": IconDefinition("🎵", ("música", "canción", "audio"), "Nota musical"),

    # Security
    "lock": IconDefinition("🔒", ("bloqueado", "candado", "seguridad", "cerrado"), "Candado cerrado"),
    "unlock": IconDefinition("🔓", ("desbloqueado", "abierto"), "Candado abierto"),
    "eye": IconDefinition("👁️", ("ver", "mostrar", "contraseña visible"), "Ojito para ver"),
    "eyeOff": IconDefinition("🙈", ("ocultar", "contraseña oculta"), "Ojito tachado - ocultar"),

    # Navigation & actions
    "search": IconDefinition("🔍", ("buscar", "lupa", "encontrar"), "Lupa para buscar"),
    "back": IconDefinition("⬅️", ("atrás", "volver", "flecha izquierda"), "Flecha para volver atrás"),
    "forward": IconDefinition("➡️", ("siguiente", "adelante", "flecha derecha"), "Flecha para ir adelante"),
    "up": IconDefinition("⬆️", ("arriba", "subir"), "Flecha hacia arriba"),
    "down": IconDefinition("⬇️", ("abajo", "bajar", "desplegar"), "Flecha hacia abajo"),
    "close": IconDefinition("❌", ("cerrar", "cruz", "cancelar", "equis"), "Cruz para cerrar"),
    "download": IconDefinition("📥", ("descargar", "bajar", "guardar"), "Flecha hacia abajo - descargar"),
    "upload": IconDefinition("📤", ("subir", "cargar", "enviar archivo"), "Flecha hacia arriba - subir"),
    "delete": IconDefinition("🗑️", ("borrar", "eliminar", "tacho", "basura"), "Tacho de basura - borrar"),
    "edit": IconDefinition("✏️", ("editar", "modificar", "lápiz"), "Lápiz para editar"),
    "copy": IconDefinition("📋", ("copiar", "duplicar"), "Dos cuadraditos - copiar"),
    "share": IconDefinition("🔗", ("compartir", "enviar", "mandar"), "Flechita para compartir"),

    # Status
    "help": IconDefinition("❓", ("ayuda", "pregunta", "signo de pregunta"), "Signo de pregunta - ayuda"),
    "warning": IconDefinition("⚠️", ("advertencia", "alerta", "atención", "cuidado"),
                              "Signo de exclamación - advertencia"),
    "success": IconDefinition("✅", ("listo", "correcto", "bien", "ok", "tilde"), "Tilde verde - todo bien"),
    "error": IconDefinition("⛔", ("error", "mal", "problema", "cruz roja"), "Cruz roja - error"),
    "info": IconDefinition("ℹ️", ("información", "info", "i"), "Letra i - información"),

    # Other
    "globe": IconDefinition("🌐", ("internet", "navegador", "web", "mundo"), "Mundo/globo - internet"),
    "location": IconDefinition("📍", ("ubicación", "lugar", "gps", "mapa"), "Pin de ubicación"),
    "clock": IconDefinition("🕒", ("hora", "reloj", "tiempo"), "Reloj"),
    "calendar": IconDefinition("📅", ("calendario", "fecha", "día"), "Calendario"),
    "user": IconDefinition("👤", ("usuario", "persona", "perfil", "cuenta"), "Persona - perfil de usuario"),
    "contacts": IconDefinition("👥", ("contactos", "personas", "agenda"), "Personas - contactos"),
    "brightness": IconDefinition("☀️", ("brillo", "sol", "pantalla clara"), "Sol - brillo de pantalla"),
    "darkMode": IconDefinition("🌙", ("modo oscuro", "noche", "luna"), "Luna - modo oscuro"),
    "flash": IconDefinition("⚡", ("flash", "rayo", "linterna"), "Rayito - flash/linterna"),

    # Devices
    "phone_device": IconDefinition("📱", ("celular", "teléfono", "smartphone", "móvil"), "Celular/smartphone"),
    "tablet": IconDefinition("📲", ("tablet", "ipad", "tableta"), "Tablet"),
    "computer": IconDefinition("🖥️", ("computadora", "monitor", "pantalla", "pc"), "Monitor de computadora"),
    "tv": IconDefinition("📺", ("televisor", "tv", "tele", "pantalla"), "Televisor"),
    "printer": IconDefinition("🖨️", ("impresora", "imprimir"), "Impresora"),
    "headphones": IconDefinition("🎧", ("auriculares", "vincha"), "Auriculares"),
    "speaker": IconDefinition("🔈", ("parlante", "altavoz", "bocina"), "Parlante externo"),
}


def resolve_icons(keys: list[str] | None) -> list[tuple[str, IconDefinition]]:
    """Look up icon keys in order, silently skipping the unknown ones."""
    if not keys:
        return []
    return [(key, ICON_BANK[key]) for key in keys if key in ICON_BANK]
