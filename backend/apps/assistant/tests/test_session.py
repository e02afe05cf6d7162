"""
Tests for the assistant session loop: phase transitions, tool rounds,
the iteration cap, action capture and error handling.
"""
import asyncio
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings

from apps.assistant.session import AssistantSession, SessionPhase
from apps.assistant.tools import executor as executor_module
from apps.assistant.tools.executor import ToolOutcome
from apps.common.llm_providers import ChatMessage, ModelTurn, ToolCall, ToolResultBlock

from .helpers import ScriptedProvider, collect, event_dicts, final_turn, tool_turn

USER_MESSAGES = [ChatMessage(role='user', content='How are Sarah & Mike doing?')]
SYSTEM_PROMPT = 'You are a test assistant.'


def _run(session):
    return asyncio.run(collect(session.run(USER_MESSAGES, SYSTEM_PROMPT)))


class DirectAnswerTests(SimpleTestCase):
    """First model response has no tool calls"""

    def test_single_delta_then_done(self):
        provider = ScriptedProvider(turns=[final_turn('Hello! How can I help?')])
        session = AssistantSession(provider=provider)

        events = event_dicts(_run(session))

        self.assertEqual(events, [
            {'type': 'delta', 'text': 'Hello! How can I help?'},
            {'type': 'done'},
        ])
        self.assertEqual(provider.stream_calls, [])
        self.assertEqual(session.state.phase, SessionPhase.DONE)

    def test_empty_text_emits_only_done(self):
        provider = ScriptedProvider(turns=[final_turn('')])
        events = event_dicts(_run(AssistantSession(provider=provider)))
        self.assertEqual(events, [{'type': 'done'}])

    def test_no_tool_calls_without_end_turn_is_still_terminal(self):
        provider = ScriptedProvider(turns=[ModelTurn(text='Cut off', stop_reason='max_tokens')])
        events = event_dicts(_run(AssistantSession(provider=provider)))
        self.assertEqual(events, [{'type': 'delta', 'text': 'Cut off'}, {'type': 'done'}])

    def test_natural_stop_ends_gathering_even_with_tool_calls(self):
        turn = tool_turn(ToolCall(id='t1', name='navigate_to', input={'url': '/planners'}), text='Done.')
        turn.stop_reason = 'end_turn'
        provider = ScriptedProvider(turns=[turn])
        session = AssistantSession(provider=provider)

        events = event_dicts(_run(session))

        self.assertEqual(events, [{'type': 'delta', 'text': 'Done.'}, {'type': 'done'}])
        self.assertEqual(session.state.iteration_count, 0)

    def test_tools_and_system_prompt_sent_to_model(self):
        provider = ScriptedProvider(turns=[final_turn('Hi')])
        _run(AssistantSession(provider=provider))

        call = provider.complete_calls[0]
        self.assertEqual(call['system_prompt'], SYSTEM_PROMPT)
        self.assertEqual(
            [tool['name'] for tool in call['tools']],
            ['get_couples_list', 'get_couple_vendor_summary', 'parse_couple',
             'open_couple_modal', 'navigate_to', 'mark_vendor_booked'],
        )
        self.assertEqual(call['messages'], USER_MESSAGES)


class ToolRoundTests(SimpleTestCase):
    """Sessions that dispatch at least one tool"""

    def test_gathering_text_is_never_forwarded(self):
        provider = ScriptedProvider(
            turns=[
                tool_turn(
                    ToolCall(id='t1', name='navigate_to', input={'url': '/planners?view=vendors'}),
                    text='Let me open the vendors view first.',
                ),
                final_turn('Here is what I found (discarded).'),
            ],
            fragments=['Opening ', 'the vendors ', 'view.'],
        )
        session = AssistantSession(provider=provider)

        events = event_dicts(_run(session))

        deltas = [e['text'] for e in events if e['type'] == 'delta']
        self.assertEqual(deltas, ['Opening ', 'the vendors ', 'view.'])
        self.assertEqual(events[-2:], [
            {'type': 'action', 'action': {'type': 'navigate', 'payload': {'url': '/planners?view=vendors'}}},
            {'type': 'done'},
        ])
        self.assertEqual(len(provider.stream_calls), 1)
        self.assertEqual(session.state.iteration_count, 1)

    def test_streaming_phase_sees_tool_exchange(self):
        provider = ScriptedProvider(
            turns=[
                tool_turn(ToolCall(id='t1', name='navigate_to', input={'url': '/planners'}), text='Preamble'),
                final_turn('ignored'),
            ],
            fragments=['ok'],
        )
        _run(AssistantSession(provider=provider))

        history = provider.stream_calls[0]['messages']
        self.assertEqual(len(history), 3)
        self.assertEqual(history[0], USER_MESSAGES[0])

        assistant_turn = history[1]
        self.assertEqual(assistant_turn.role, 'assistant')
        self.assertEqual(assistant_turn.text, 'Preamble')
        self.assertEqual(assistant_turn.content, [ToolCall(id='t1', name='navigate_to', input={'url': '/planners'})])

        results_turn = history[2]
        self.assertEqual(results_turn.role, 'user')
        self.assertEqual(results_turn.content, [
            ToolResultBlock(tool_call_id='t1', content={'success': True, 'message': 'Will navigate to /planners'}),
        ])

    def test_each_round_appends_calls_then_results(self):
        provider = ScriptedProvider(
            turns=[
                tool_turn(ToolCall(id='r1', name='navigate_to', input={'url': '/planners'})),
                tool_turn(ToolCall(id='r2', name='navigate_to', input={'url': '/planners?view=couples'})),
                final_turn(),
            ],
        )
        session = AssistantSession(provider=provider)
        _run(session)

        self.assertEqual(session.state.iteration_count, 2)
        self.assertEqual(len(provider.complete_calls), 3)
        self.assertEqual(len(provider.complete_calls[1]['messages']), 3)
        self.assertEqual(len(provider.complete_calls[2]['messages']), 5)
        self.assertEqual(
            [m.role for m in provider.complete_calls[2]['messages']],
            ['user', 'assistant', 'user', 'assistant', 'user'],
        )

    def test_tool_round_logs_display_names(self):
        provider = ScriptedProvider(
            turns=[
                tool_turn(
                    ToolCall(id='n1', name='navigate_to', input={'url': '/planners'}),
                    ToolCall(id='n2', name='delete_everything', input={}),
                ),
                final_turn(),
            ],
        )

        with self.assertLogs('apps.assistant.session', level='INFO') as logs:
            _run(AssistantSession(provider=provider))

        rounds = [record for record in logs.records if record.getMessage() == 'assistant_tool_round']
        self.assertEqual(len(rounds), 1)
        self.assertEqual(rounds[0].tools, ['Navigate', 'delete_everything'])
        self.assertEqual(rounds[0].failed, 1)

    def test_iteration_cap_stops_after_ten_rounds(self):
        provider = ScriptedProvider(
            turns=[tool_turn(ToolCall(id='loop', name='navigate_to', input={'url': '/planners'}))],
            fragments=['Summary'],
        )
        session = AssistantSession(provider=provider)

        events = event_dicts(_run(session))

        self.assertEqual(len(provider.complete_calls), 10)
        self.assertEqual(session.state.iteration_count, 10)
        self.assertEqual(len(provider.stream_calls), 1)
        self.assertEqual(events[0], {'type': 'delta', 'text': 'Summary'})
        self.assertEqual(events[-1], {'type': 'done'})

    def test_iteration_cap_follows_setting(self):
        provider = ScriptedProvider(
            turns=[tool_turn(ToolCall(id='loop', name='navigate_to', input={'url': '/planners'}))],
        )
        with override_settings(ASSISTANT_MAX_ITERATIONS=3):
            session = AssistantSession(provider=provider)
        _run(session)

        self.assertEqual(len(provider.complete_calls), 3)
        self.assertEqual(len(provider.stream_calls), 1)

    def test_results_correlate_by_id_when_completing_in_reverse(self):
        delays = {'a': 0.03, 'b': 0.02, 'c': 0.01}
        finished = []

        async def fake_summary(params):
            await asyncio.sleep(delays[params.couple_id])
            finished.append(params.couple_id)
            return ToolOutcome(output={'couple': params.couple_id})

        provider = ScriptedProvider(
            turns=[
                tool_turn(*[
                    ToolCall(id=call_id, name='get_couple_vendor_summary', input={'couple_id': call_id})
                    for call_id in ('a', 'b', 'c')
                ]),
                final_turn(),
            ],
        )
        with patch.dict(executor_module._DISPATCH_TABLE, {'get_couple_vendor_summary': fake_summary}):
            _run(AssistantSession(provider=provider))

        self.assertEqual(finished, ['c', 'b', 'a'])
        results = provider.stream_calls[0]['messages'][-1].content
        self.assertEqual(len(results), 3)
        self.assertEqual(
            {block.tool_call_id: block.content['couple'] for block in results},
            {'a': 'a', 'b': 'b', 'c': 'c'},
        )

    def test_failing_tool_does_not_stop_siblings_or_later_rounds(self):
        async def broken(params):
            raise RuntimeError('database unavailable')

        provider = ScriptedProvider(
            turns=[
                tool_turn(
                    ToolCall(id='bad', name='get_couples_list', input={}),
                    ToolCall(id='good', name='navigate_to', input={'url': '/planners'}),
                ),
                tool_turn(ToolCall(id='next', name='navigate_to', input={'url': '/planners?view=settings'})),
                final_turn(),
            ],
            fragments=['Done'],
        )
        session = AssistantSession(provider=provider)
        with patch.dict(executor_module._DISPATCH_TABLE, {'get_couples_list': broken}):
            events = event_dicts(_run(session))

        first_results = provider.complete_calls[1]['messages'][-1].content
        self.assertEqual(first_results[0].content, {'error': 'database unavailable'})
        self.assertTrue(first_results[1].content['success'])
        self.assertEqual(session.state.iteration_count, 2)
        self.assertEqual(events[-1], {'type': 'done'})


class ActionCaptureTests(SimpleTestCase):

    def test_rejected_navigation_does_not_clear_earlier_action(self):
        couple = {'action': 'create', 'couple_data': {'couple_names': 'Sarah & Mike'}}
        provider = ScriptedProvider(
            turns=[
                tool_turn(
                    ToolCall(id='x', name='open_couple_modal', input={'coupleData': couple}),
                    ToolCall(id='y', name='navigate_to', input={'url': 'javascript:alert(1)'}),
                ),
                final_turn(),
            ],
            fragments=['Opening the editor.'],
        )
        events = event_dicts(_run(AssistantSession(provider=provider)))

        actions = [e for e in events if e['type'] == 'action']
        self.assertEqual(actions, [
            {'type': 'action', 'action': {'type': 'open_couple_modal', 'payload': couple}},
        ])
        rejected = provider.stream_calls[0]['messages'][-1].content[1]
        self.assertEqual(rejected.content, {'error': 'Navigation to javascript:alert(1) is not allowed'})

    def test_later_action_wins_across_rounds(self):
        provider = ScriptedProvider(
            turns=[
                tool_turn(ToolCall(id='1', name='navigate_to', input={'url': '/planners'})),
                tool_turn(ToolCall(id='2', name='navigate_to', input={'url': '/planners/couples/abc-123'})),
                final_turn(),
            ],
        )
        events = event_dicts(_run(AssistantSession(provider=provider)))

        actions = [e['action'] for e in events if e['type'] == 'action']
        self.assertEqual(actions, [{'type': 'navigate', 'payload': {'url': '/planners/couples/abc-123'}}])

    def test_action_precedes_done_and_follows_deltas(self):
        provider = ScriptedProvider(
            turns=[tool_turn(ToolCall(id='1', name='navigate_to', input={'url': '/planners'})), final_turn()],
            fragments=['a', 'b'],
        )
        events = event_dicts(_run(AssistantSession(provider=provider)))
        self.assertEqual([e['type'] for e in events], ['delta', 'delta', 'action', 'done'])

    def test_booking_skips_streaming(self):
        vendor = MagicMock(id='v-1', vendor_name='Aurora Photography')
        provider = ScriptedProvider(
            turns=[
                tool_turn(ToolCall(id='b', name='mark_vendor_booked', input={
                    'couple_id': 'c-1', 'vendor_id': 'v-1', 'share_link_id': 'sarah-mike',
                })),
                final_turn('Booked!'),
            ],
            fragments=['should not stream'],
        )
        with patch('apps.assistant.tools.executor.PlannerService.mark_vendor_booked', return_value=vendor):
            events = event_dicts(_run(AssistantSession(provider=provider)))

        self.assertEqual(provider.stream_calls, [])
        self.assertEqual(events, [
            {
                'type': 'action',
                'action': {
                    'type': 'navigate',
                    'payload': {
                        'url': '/planners/couples/sarah-mike?tab=vendors',
                        'bookingContext': {'vendorId': 'v-1', 'vendorName': 'Aurora Photography'},
                    },
                },
            },
            {'type': 'done'},
        ])


class ModelFailureTests(SimpleTestCase):

    def test_first_call_failure_yields_single_error(self):
        provider = ScriptedProvider(complete_error=RuntimeError('Overloaded'))
        session = AssistantSession(provider=provider)

        events = event_dicts(_run(session))

        self.assertEqual(events, [{'type': 'error', 'message': 'Overloaded'}])
        self.assertEqual(session.state.phase, SessionPhase.ERROR)

    def test_failure_after_tool_round_yields_single_error(self):
        class FailsSecondTime(ScriptedProvider):
            async def complete_with_tools(self, *args, **kwargs):
                turn = await super().complete_with_tools(*args, **kwargs)
                if len(self.complete_calls) == 2:
                    raise ConnectionError('connection reset')
                return turn

        provider = FailsSecondTime(
            turns=[tool_turn(ToolCall(id='1', name='navigate_to', input={'url': '/planners'}))],
        )
        events = event_dicts(_run(AssistantSession(provider=provider)))

        self.assertEqual(events, [{'type': 'error', 'message': 'connection reset'}])

    def test_stream_failure_after_deltas_has_no_done(self):
        provider = ScriptedProvider(
            turns=[tool_turn(ToolCall(id='1', name='navigate_to', input={'url': '/planners'})), final_turn()],
            fragments=['Partial ', 'answer', 'never sent'],
            stream_error=TimeoutError('stream timed out'),
            fail_after_fragments=2,
        )
        events = event_dicts(_run(AssistantSession(provider=provider)))

        self.assertEqual(events, [
            {'type': 'delta', 'text': 'Partial '},
            {'type': 'delta', 'text': 'answer'},
            {'type': 'error', 'message': 'stream timed out'},
        ])

    def test_error_without_message_uses_default(self):
        provider = ScriptedProvider(complete_error=RuntimeError())
        events = event_dicts(_run(AssistantSession(provider=provider)))
        self.assertEqual(events, [{'type': 'error', 'message': 'Something went wrong'}])
