"""Unit tests for the REST orchestrator client."""
import unittest
from unittest.mock import MagicMock

import grpc
import requests

from src.csi.controller import ControllerService
from src.models.models import VolumeSpec, ReplicationSpec
from src.storage.backends import get_backend
from src.storage.backends.base import BackendError
from src.storage.backends.memory_backend import InMemoryOrchestratorBackend
from src.storage.backends.rest_backend import RestOrchestratorBackend
from tests.common.messages import publish_request


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"" if payload is None else b"{}"
    response.json.return_value = payload
    response.text = str(payload)
    return response


class TestRestOrchestratorBackend(unittest.TestCase):
    """Test cases for the REST orchestrator client"""

    def setUp(self):
        self.session = MagicMock()
        self.session.headers = {}
        self.backend = RestOrchestratorBackend(
            endpoint="http://sds:50040/",
            tenant_id="tenant",
            auth_token="secret",
            timeout=5,
            api_version="v1beta",
            session=self.session,
        )

    def test_base_url_and_headers(self):
        self.assertEqual(self.backend.base_url, "http://sds:50040/v1beta/tenant")
        self.assertEqual(self.session.headers["X-Auth-Token"], "secret")
        self.assertEqual(self.session.headers["Content-Type"], "application/json")

    def test_list_volumes(self):
        self.session.request.return_value = make_response(payload=[
            {"id": "v1", "name": "vol-1", "size": 2, "profileId": "p", "availabilityZone": "default",
             "poolId": "pool-1", "status": "available", "metadata": {"lvPath": "/dev/a"}},
        ])
        volumes = self.backend.list_volumes()
        self.session.request.assert_called_once_with(
            "GET", "http://sds:50040/v1beta/tenant/block/volumes", json=None, timeout=5
        )
        self.assertEqual(len(volumes), 1)
        self.assertEqual(volumes[0].id, "v1")
        self.assertEqual(volumes[0].size, 2)
        self.assertEqual(volumes[0].metadata, {"lvPath": "/dev/a"})

    def test_empty_listing(self):
        self.session.request.return_value = make_response(payload=None)
        self.assertEqual(self.backend.list_snapshots(), [])

    def test_create_volume_body(self):
        self.session.request.return_value = make_response(payload={"id": "v1", "name": "vol-1"})
        spec = VolumeSpec(name="vol-1", size=3, profile_id="p", availability_zone="az",
                          snapshot_id="snap-1")
        volume = self.backend.create_volume(spec)
        self.session.request.assert_called_once_with(
            "POST",
            "http://sds:50040/v1beta/tenant/block/volumes",
            json={"name": "vol-1", "size": 3, "profileId": "p", "availabilityZone": "az",
                  "snapshotId": "snap-1"},
            timeout=5,
        )
        self.assertEqual(volume.id, "v1")

    def test_replications_listed_from_detail(self):
        self.session.request.return_value = make_response(payload=[
            {"id": "r1", "primaryVolumeId": "p", "secondaryVolumeId": "s"},
        ])
        replications = self.backend.list_replications()
        args, _ = self.session.request.call_args
        self.assertEqual(args[1], "http://sds:50040/v1beta/tenant/block/replications/detail")
        self.assertTrue(replications[0].references("s"))

    def test_create_replication_body(self):
        self.session.request.return_value = make_response(payload={"id": "r1"})
        self.backend.create_replication(
            ReplicationSpec(name="vol-1", primary_volume_id="p", secondary_volume_id="s")
        )
        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs["json"]["replicationMode"], "sync")
        self.assertEqual(kwargs["json"]["replicationPeriod"], 0)

    def test_pool_access_protocol_from_extras(self):
        self.session.request.return_value = make_response(payload={
            "id": "pool-1", "freeCapacity": 40,
            "extras": {"ioConnectivity": {"accessProtocol": "iscsi"}},
        })
        pool = self.backend.get_pool("pool-1")
        self.assertEqual(pool.access_protocol, "iscsi")
        self.assertEqual(pool.free_capacity, 40)

    def test_delete_sends_empty_body(self):
        self.session.request.return_value = make_response(payload=None)
        self.backend.delete_attachment("a1")
        self.session.request.assert_called_once_with(
            "DELETE", "http://sds:50040/v1beta/tenant/block/attachments/a1", json={}, timeout=5
        )

    def test_not_found_status(self):
        self.session.request.return_value = make_response(status_code=404, payload={"msg": "gone"})
        with self.assertRaises(BackendError) as ctx:
            self.backend.get_volume("missing")
        self.assertTrue(ctx.exception.not_found)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_server_error_status(self):
        self.session.request.return_value = make_response(status_code=500, payload={"msg": "boom"})
        with self.assertRaises(BackendError) as ctx:
            self.backend.list_pools()
        self.assertFalse(ctx.exception.not_found)

    def test_connection_error(self):
        self.session.request.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(BackendError) as ctx:
            self.backend.list_profiles()
        self.assertIsNone(ctx.exception.status_code)

    def test_empty_record_is_not_found(self):
        for body in (None, []):
            for method in ("get_volume", "get_snapshot", "get_replication", "get_pool"):
                with self.subTest(body=body, method=method):
                    self.session.request.return_value = make_response(payload=body)
                    with self.assertRaises(BackendError) as ctx:
                        getattr(self.backend, method)("x")
                    self.assertTrue(ctx.exception.not_found)

    def test_publish_of_empty_volume_record_is_not_found(self):
        response = make_response(payload=None)
        response.content = b"null"
        self.session.request.return_value = response
        context = MagicMock()

        ControllerService(self.backend).ControllerPublishVolume(publish_request("vol-x"), context)

        context.set_code.assert_called_with(grpc.StatusCode.NOT_FOUND)

    def test_invalid_json(self):
        response = make_response(payload={})
        response.json.side_effect = ValueError("bad json")
        self.session.request.return_value = response
        with self.assertRaises(BackendError):
            self.backend.get_snapshot("s1")


class TestGetBackend(unittest.TestCase):
    def test_memory(self):
        self.assertIsInstance(get_backend("memory"), InMemoryOrchestratorBackend)

    def test_rest(self):
        backend = get_backend("rest", endpoint="http://sds:50040", session=MagicMock(headers={}))
        self.assertIsInstance(backend, RestOrchestratorBackend)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            get_backend("nfs")


if __name__ == '__main__':
    unittest.main()
