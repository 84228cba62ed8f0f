"""
Unit tests for the basic CRUD walkthrough.
"""

from unittest.mock import MagicMock, patch

from pymongo.errors import ServerSelectionTimeoutError

from mongo_practice import basic_crud

USERS = [
    {"name": "John Doe", "email": "john@example.com", "age": 28},
    {"name": "Jane Smith", "email": "jane@example.com", "age": 25, "status": "active"},
    {"name": "Bob Wilson", "email": "bob@example.com", "age": 32, "status": "inactive"},
    {"name": "Alice Brown", "email": "alice@example.com", "age": 29, "status": "active"},
]


class TestCreateOperations:
    """Test inserts"""

    def test_insert_one_and_many(self, collection):
        """Test the inserted ids and batch size"""
        collection.insert_one.return_value.inserted_id = "abc"
        collection.insert_many.return_value.inserted_ids = [1, 2, 3]

        result = basic_crud.create_operations(collection)

        assert result == {"inserted_id": "abc", "inserted_many": 3}
        first = collection.insert_one.call_args.args[0]
        assert first["address"] == {"city": "New York", "country": "USA"}
        assert len(collection.insert_many.call_args.args[0]) == 3


class TestReadOperations:
    """Test the query operators"""

    def test_reads(self, collection, cursor_factory):
        """Test counts, projection and sort/limit"""
        collection.find.side_effect = lambda *args, **kwargs: cursor_factory(
            sorted(USERS, key=lambda u: -u["age"])
        )
        collection.find_one.return_value = USERS[0]

        results = basic_crud.read_operations(collection)

        assert results["total"] == 4
        assert results["found"] == "John Doe"
        assert results["oldest"] == ["Bob Wilson", "Alice Brown"]
        queries = [c.args[0] for c in collection.find.call_args_list]
        assert {"$or": [{"age": {"$lt": 26}}, {"status": "inactive"}]} in queries
        assert {"status": "active", "age": {"$gte": 25}} in queries
        assert ({}, {"name": 1, "email": 1, "_id": 0}) in [c.args for c in collection.find.call_args_list]

    def test_missing_user(self, collection, cursor_factory):
        """Test find_one returning nothing"""
        collection.find.side_effect = lambda *args, **kwargs: cursor_factory([])
        collection.find_one.return_value = None

        assert basic_crud.read_operations(collection)["found"] is None


class TestUpdateOperations:
    """Test the update operators"""

    def test_operators_and_upsert(self, collection):
        """Test $set/$inc/$push/$pull and the upsert"""
        collection.update_many.return_value.modified_count = 1
        collection.update_one.return_value.upserted_id = "new-id"

        result = basic_crud.update_operations(collection)

        assert result == {"seniors": 1, "upserted_id": "new-id"}
        updates = [c.args[1] for c in collection.update_one.call_args_list]
        assert {"$inc": {"age": 1}} in updates
        assert {"$push": {"hobbies": "gaming"}} in updates
        assert {"$pull": {"hobbies": "reading"}} in updates
        last = collection.update_one.call_args
        assert last.args[0] == {"email": "new@example.com"}
        assert last.kwargs == {"upsert": True}


class TestDeleteOperations:
    """Test deletes"""

    def test_deletes_and_count(self, collection):
        """Test deleted counts and the final count"""
        collection.delete_one.return_value.deleted_count = 1
        collection.delete_many.return_value.deleted_count = 1
        collection.count_documents.return_value = 3

        result = basic_crud.delete_operations(collection)

        assert result == {"deleted_one": 1, "deleted_inactive": 1, "final_count": 3}
        collection.delete_many.assert_called_once_with({"status": "inactive"})


class TestRun:
    """Test the full walkthrough"""

    def test_run_clears_first(self, collection, cursor_factory):
        """Test that the collection is emptied before inserts"""
        collection.find.side_effect = lambda *args, **kwargs: cursor_factory([])
        collection.find_one.return_value = None

        basic_crud.run(collection)

        assert collection.method_calls[0] == ("delete_many", ({},), {})


class TestMain:
    """Test the entry point"""

    def test_connection_error_returns_1(self, capsys):
        """Test that driver errors are reported and the client closed"""
        client = MagicMock()
        with patch.object(basic_crud, "get_client", return_value=client), patch.object(
            basic_crud, "get_database", side_effect=ServerSelectionTimeoutError("no servers")
        ):
            code = basic_crud.main(["--uri", "mongodb://nowhere:27017"])

        assert code == 1
        client.close.assert_called_once_with()
        assert "❌ Error: no servers" in capsys.readouterr().out

    def test_success_returns_0(self):
        """Test the happy path"""
        client = MagicMock()
        db = MagicMock()
        with patch.object(basic_crud, "get_client", return_value=client), patch.object(
            basic_crud, "get_database", return_value=db
        ), patch.object(basic_crud, "run") as run:
            code = basic_crud.main(["--db", "scratch"])

        assert code == 0
        run.assert_called_once_with(db.__getitem__.return_value)
        db.__getitem__.assert_called_once_with("users")
