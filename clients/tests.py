from django.test import TestCase

from clients.models import Client
from clients.serializers import ClientSerializer


class ClientSerializerTest(TestCase):
    def test_create_normalizes_fields(self):
        serializer = ClientSerializer(data={"name": "  María López ", "rfc": " lopm800101ab1 "})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        client = serializer.save()
        self.assertEqual(client.name, "María López")
        self.assertEqual(client.rfc, "LOPM800101AB1")

    def test_name_is_required(self):
        serializer = ClientSerializer(data={"name": ""})
        self.assertFalse(serializer.is_valid())
        self.assertIn("name", serializer.errors)

    def test_ordering_and_str(self):
        Client.objects.create(name="Zapata")
        Client.objects.create(name="Aguilar")
        self.assertEqual([str(c) for c in Client.objects.all()], ["Aguilar", "Zapata"])
