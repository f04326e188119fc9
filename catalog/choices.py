"""Choice enums for catalog app."""

from django.db import models


class ProductCategory(models.TextChoices):
    COCINA = "Cocina", "Cocina"
    VESTIDOR = "Vestidor", "Vestidor"
    BANO = "Baño", "Baño"
    SALA = "Sala", "Sala"
    COMEDOR = "Comedor", "Comedor"
    RECAMARA = "Recámara", "Recámara"
    OFICINA = "Oficina", "Oficina"
    OTROS = "Otros", "Otros"


class Unit(models.TextChoices):
    SQUARE_METER = "m²", "Metro cuadrado"
    LINEAR_METER = "m", "Metro lineal"
    PIECE = "pieza", "Pieza"
    SET = "juego", "Juego"
    SERVICE = "servicio", "Servicio"
    HOUR = "hora", "Hora"
    DAY = "día", "Día"


class AccessoryCategory(models.TextChoices):
    HERRAJE = "Herraje", "Herraje"
    LAMBRIN = "Lambrín", "Lambrín"
    MANO_DE_OBRA = "Mano de obra", "Mano de obra"
    PUERTA = "Puerta", "Puerta"
    VIDRIO = "Vidrío", "Vidrío"


class MaterialCategory(models.TextChoices):
    """Which slot of a furniture bill of materials a material can fill."""

    TABLERO = "Tablero", "Tablero"
    CHAPACINTA = "Chapacinta", "Chapacinta"
    JALADERA = "Jaladera", "Jaladera"
    CORREDERA = "Corredera", "Corredera"
    BISAGRA = "Bisagra", "Bisagra"
    TIP_ON = "Tip-on", "Tip-on"
