"""
Tests for ToolExecutor: dispatch, input validation, error payloads,
concurrency and the actions produced by client-facing tools.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

from django.test import SimpleTestCase

from apps.assistant.tools import executor as executor_module
from apps.assistant.tools.executor import COUPLES_LIST_HINT, ToolExecutor, ToolOutcome
from apps.common.exceptions import CoupleNotFound, CoupleParseError
from apps.common.llm_providers import ToolCall
from apps.planners.schemas import CoupleData, ParsedCoupleOperation


def _execute(name, input=None, call_id='toolu_1'):
    return asyncio.run(ToolExecutor.execute(ToolCall(id=call_id, name=name, input=input or {})))


class DispatchTests(SimpleTestCase):

    def test_unknown_tool(self):
        result = _execute('delete_couple')
        self.assertFalse(result.success)
        self.assertEqual(result.payload, {'error': 'Unknown tool: delete_couple'})
        self.assertEqual(result.call_id, 'toolu_1')

    def test_invalid_input_becomes_error_payload(self):
        result = _execute('get_couple_vendor_summary', {})
        self.assertFalse(result.success)
        self.assertIn('Invalid input for get_couple_vendor_summary', result.error)
        self.assertIn('couple_id', result.error)

    @patch('apps.assistant.tools.executor.PlannerService.list_couples')
    def test_couples_list_includes_hint(self, mock_list):
        mock_list.return_value = [{'couple_id': 'c-1', 'couple_names': 'Sarah & Mike'}]

        result = _execute('get_couples_list')

        self.assertTrue(result.success)
        self.assertEqual(result.payload, {
            'couples': [{'couple_id': 'c-1', 'couple_names': 'Sarah & Mike'}],
            '_hint': COUPLES_LIST_HINT,
        })
        self.assertIsNone(result.action)

    @patch('apps.assistant.tools.executor.PlannerService.vendor_summary')
    def test_vendor_summary_passes_couple_id(self, mock_summary):
        mock_summary.return_value = {'total': 0, 'vendors': []}

        result = _execute('get_couple_vendor_summary', {'couple_id': 'c-1'})

        mock_summary.assert_called_once_with('c-1')
        self.assertEqual(result.payload, {'total': 0, 'vendors': []})

    @patch('apps.assistant.tools.executor.PlannerService.vendor_summary')
    def test_not_found_message_exposed(self, mock_summary):
        mock_summary.side_effect = CoupleNotFound('Couple c-9 not found')

        result = _execute('get_couple_vendor_summary', {'couple_id': 'c-9'})

        self.assertEqual(result.payload, {'error': 'Couple c-9 not found'})

    @patch('apps.assistant.tools.executor.PlannerService.list_couples')
    def test_unexpected_exception_message_exposed(self, mock_list):
        mock_list.side_effect = RuntimeError('connection refused')
        result = _execute('get_couples_list')
        self.assertEqual(result.payload, {'error': 'connection refused'})

    @patch('apps.assistant.tools.executor.PlannerService.list_couples')
    def test_exception_without_message_uses_fallback(self, mock_list):
        mock_list.side_effect = RuntimeError()
        result = _execute('get_couples_list')
        self.assertEqual(result.payload, {'error': 'Tool execution failed'})


class ParseCoupleToolTests(SimpleTestCase):

    @patch('apps.assistant.tools.executor.CoupleParseService')
    def test_returns_first_operation(self, mock_service_cls):
        operation = ParsedCoupleOperation(
            action='create',
            couple_data=CoupleData(couple_names='Sarah & Mike', wedding_date='2026-09-14'),
            confidence=0.9,
        )
        mock_service_cls.return_value.parse = AsyncMock(return_value=operation)

        result = _execute('parse_couple', {'description': 'Sarah and Mike, 14 Sept 2026'})

        mock_service_cls.return_value.parse.assert_awaited_once_with('Sarah and Mike, 14 Sept 2026')
        self.assertTrue(result.success)
        self.assertEqual(result.payload['couple_data']['couple_names'], 'Sarah & Mike')
        self.assertEqual(result.payload['action'], 'create')
        self.assertIsNone(result.action)

    @patch('apps.assistant.tools.executor.CoupleParseService')
    def test_parse_error_becomes_payload(self, mock_service_cls):
        mock_service_cls.return_value.parse = AsyncMock(
            side_effect=CoupleParseError('Could not extract couple information from the description')
        )
        result = _execute('parse_couple', {'description': 'hello'})
        self.assertEqual(result.payload, {'error': 'Could not extract couple information from the description'})

    def test_blank_description_rejected(self):
        result = _execute('parse_couple', {'description': '   '})
        self.assertFalse(result.success)


class ClientActionToolTests(SimpleTestCase):

    def test_open_couple_modal_forwards_data_verbatim(self):
        couple = {'action': 'create', 'couple_data': {'couple_names': 'Emma & James'}, 'extra': [1, 2]}

        result = _execute('open_couple_modal', {'coupleData': couple})

        self.assertTrue(result.success)
        self.assertEqual(result.action.type, 'open_couple_modal')
        self.assertEqual(result.action.payload, couple)

    def test_open_couple_modal_keeps_whitespace_in_keys(self):
        couple = {' couple_names ': '  Emma & James ', 'details': {' venue ': ['Barn ', ' Garden']}}

        result = _execute('open_couple_modal', {'coupleData': couple})

        self.assertTrue(result.success)
        self.assertEqual(result.action.payload, couple)
        self.assertEqual(list(result.action.payload), [' couple_names '])

    def test_navigate_allowed(self):
        result = _execute('navigate_to', {'url': '/planners/couples/abc-123'})
        self.assertEqual(result.payload, {'success': True, 'message': 'Will navigate to /planners/couples/abc-123'})
        self.assertEqual(result.action.payload, {'url': '/planners/couples/abc-123'})

    def test_navigate_rejected(self):
        result = _execute('navigate_to', {'url': '/planners/couples/../../etc'})
        self.assertEqual(result.payload, {'error': 'Navigation to /planners/couples/../../etc is not allowed'})
        self.assertIsNone(result.action)

    @patch('apps.assistant.tools.executor.PlannerService.mark_vendor_booked')
    def test_mark_vendor_booked_navigates_with_booking_context(self, mock_book):
        mock_book.return_value = MagicMock(id='v-1', vendor_name='Aurora Photography')

        result = _execute('mark_vendor_booked', {
            'couple_id': 'c-1', 'vendor_id': 'v-1', 'share_link_id': 'sarah-mike',
        })

        mock_book.assert_called_once_with('c-1', 'v-1')
        self.assertTrue(result.success)
        self.assertEqual(result.action.payload, {
            'url': '/planners/couples/sarah-mike?tab=vendors',
            'bookingContext': {'vendorId': 'v-1', 'vendorName': 'Aurora Photography'},
        })
        self.assertTrue(result.action.has_booking_context)

    def test_mark_vendor_booked_rejects_unsafe_share_link(self):
        result = _execute('mark_vendor_booked', {
            'couple_id': 'c-1', 'vendor_id': 'v-1', 'share_link_id': '../admin',
        })
        self.assertFalse(result.success)
        self.assertIsNone(result.action)


class BatchTests(SimpleTestCase):

    def test_empty_batch(self):
        self.assertEqual(asyncio.run(ToolExecutor.execute_batch([])), [])

    def test_calls_run_concurrently(self):
        first_started = asyncio.Event()
        second_started = asyncio.Event()

        async def first(params):
            first_started.set()
            await second_started.wait()
            return ToolOutcome(output={'name': 'first'})

        async def second(params):
            second_started.set()
            await first_started.wait()
            return ToolOutcome(output={'name': 'second'})

        calls = [
            ToolCall(id='1', name='get_couples_list', input={}),
            ToolCall(id='2', name='get_couple_vendor_summary', input={'couple_id': 'c'}),
        ]

        async def run():
            # Sequential dispatch would deadlock here
            return await asyncio.wait_for(ToolExecutor.execute_batch(calls), timeout=2)

        with patch.dict(executor_module._DISPATCH_TABLE, {
            'get_couples_list': first,
            'get_couple_vendor_summary': second,
        }):
            results = asyncio.run(run())

        self.assertEqual([r.payload for r in results], [{'name': 'first'}, {'name': 'second'}])

    def test_one_result_per_call_in_request_order(self):
        calls = [
            ToolCall(id='a', name='navigate_to', input={'url': '/planners'}),
            ToolCall(id='b', name='unknown_tool', input={}),
            ToolCall(id='c', name='navigate_to', input={'url': 'javascript:alert(1)'}),
        ]

        results = asyncio.run(ToolExecutor.execute_batch(calls))

        self.assertEqual([r.call_id for r in results], ['a', 'b', 'c'])
        self.assertEqual([r.success for r in results], [True, False, False])
